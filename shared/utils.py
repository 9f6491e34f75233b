from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Generic, TypeVar, Any, List
import logging
import uuid

from fastapi import FastAPI, HTTPException, Request, status, Header
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from passlib.context import CryptContext
from pydantic import BaseModel
from pydantic_settings import BaseSettings
from jose import JWTError, jwt

logger = logging.getLogger(__name__)

# --- Configuration ---
class Settings(BaseSettings):
    SERVICE_NAME: str = "storefront"
    HOST: str = "0.0.0.0"
    PORT: int = 3002
    LOG_LEVEL: str = "INFO"
    USERS_FILE: str = "users.json"
    CORS_ORIGINS: List[str] = ["*"]

    SECRET_KEY: str = "secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    LOGIN_RATE_LIMIT: str = "5/minute"

    # Pricing policy
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("100.00")
    SHIPPING_FEE: Decimal = Decimal("10.00")
    TAX_RATE: Decimal = Decimal("0.08")

    class Config:
        env_file = ".env"

settings = Settings()

# --- Authentication ---
# bcrypt keeps the demo credentials out of the users file in clear text
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None,
                        config: Settings = settings) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta

    if "jti" not in to_encode:
        to_encode["jti"] = str(uuid.uuid4())

    to_encode["exp"] = expire
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)

def verify_token(token: str, config: Settings = settings) -> dict:
    try:
        return jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        raise UnauthorizedException("Could not validate credentials")

def parse_bearer(authorization: Optional[str]) -> str:
    scheme, _, param = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not param:
        raise UnauthorizedException("Invalid authentication credentials")
    return param

# --- Response Models ---
T = TypeVar("T")

class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None

class HealthResponse(BaseModel):
    service: str
    status: str
    timestamp: datetime
    version: str
    dependencies: Optional[dict] = None


# --- Exceptions ---
class AppException(HTTPException):
    def __init__(
        self,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        detail: str = "An error occurred",
        headers: Optional[dict] = None,
        details: Any = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.details = details

class ValidationException(AppException):
    def __init__(self, detail: str = "Invalid input", details: Any = None):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail, details=details)

class NotFoundException(AppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ConflictException(AppException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class UnauthorizedException(AppException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )

def _error_response(status_code: int, error: str, details: Any = None,
                    headers: Optional[dict] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)

def register_exception_handlers(app: FastAPI):
    """
    Render every error as ErrorResponse:
    - AppException / HTTPException: its status and detail
    - request validation: 400 with the pydantic error list
    - anything else: logged, generic 500
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return _error_response(exc.status_code, str(exc.detail), exc.details, exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", jsonable_encoder(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled error",
            exc_info=exc,
            extra={"request_id": getattr(request.state, "request_id", None), "path": request.url.path},
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong!")

# --- Decorators/Dependencies ---
async def require_auth(request: Request, authorization: Optional[str] = Header(None)) -> dict:
    payload = verify_token(parse_bearer(authorization), request.app.state.settings)
    user_store = request.app.state.user_store
    if user_store.is_revoked(payload.get("jti")):
        raise UnauthorizedException("Token has been revoked")
    return payload
