import json
import logging
import os
import threading
import uuid
from pathlib import Path
from typing import List, Optional, Set, Union

from shared.utils import ConflictException, get_password_hash, verify_password
from storefront.models import User

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@shophub.com"
DEMO_PASSWORD = "demo123"
DEMO_NAME = "Demo User"


def default_users() -> List[User]:
    return [User(id="1", email=DEMO_EMAIL, name=DEMO_NAME,
                 password_hash=get_password_hash(DEMO_PASSWORD))]


class UserStore:
    """
    Users kept in a flat JSON array file.

    The file is read once when the store is loaded and rewritten wholesale on
    each registration. Revoked token ids live only in memory.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._users: List[User] = []
        self._revoked: Set[str] = set()
        self._lock = threading.Lock()

    def load(self) -> "UserStore":
        users = None
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    users = [User.model_validate(u) for u in json.load(f)]
            except (OSError, ValueError) as e:
                logger.error(f"Error loading users file {self.path}: {e}")
        if users is None:
            users = default_users()
        self._users = users
        logger.info(f"Loaded {len(users)} users", extra={"path": str(self.path)})
        return self

    def save(self):
        # atomic replace
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        payload = [u.model_dump(by_alias=True) for u in self._users]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        os.replace(tmp_path, self.path)
        logger.info("Users saved to file", extra={"path": str(self.path)})

    def __len__(self) -> int:
        return len(self._users)

    def all(self) -> List[User]:
        return list(self._users)

    def find_by_email(self, email: str) -> Optional[User]:
        wanted = email.lower()
        for user in self._users:
            if user.email.lower() == wanted:
                return user
        return None

    def get(self, user_id: str) -> Optional[User]:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def register(self, email: str, password: str, name: str) -> User:
        with self._lock:
            if self.find_by_email(email) is not None:
                raise ConflictException("User already exists")
            user = User(
                id=uuid.uuid4().hex,
                email=email,
                name=name,
                password_hash=get_password_hash(password),
            )
            self._users.append(user)
            self.save()
        return user

    def revoke(self, jti: Optional[str]):
        if jti:
            self._revoked.add(jti)

    def is_revoked(self, jti: Optional[str]) -> bool:
        return bool(jti) and jti in self._revoked
