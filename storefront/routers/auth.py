import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status

from shared.security_config import limiter
from shared.utils import (
    SuccessResponse, Settings, UnauthorizedException,
    create_access_token, parse_bearer, require_auth, settings, verify_token
)
from storefront.dependencies import get_settings, get_user_store
from storefront.models import User
from storefront.schemas import AuthResponse, UserLogin, UserRegister, UserResponse
from storefront.user_store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def build_auth_response(user: User, config: Settings) -> AuthResponse:
    token = create_access_token(data={"sub": user.id, "email": user.email}, config=config)
    return AuthResponse(
        user_id=user.id,
        user=UserResponse(id=user.id, email=user.email, name=user.name),
        access_token=token,
    )


@router.post("/login", response_model=SuccessResponse[AuthResponse])
# Process-wide: the limiter and this limit are fixed at import
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    credentials: UserLogin,
    request: Request,
    users: UserStore = Depends(get_user_store),
    config: Settings = Depends(get_settings),
):
    logger.info("Login attempt", extra={"email": credentials.email})
    user = users.authenticate(credentials.email, credentials.password)
    if user is None:
        logger.warning("Login failed: invalid credentials", extra={"email": credentials.email})
        raise UnauthorizedException("Invalid credentials")

    logger.info(f"Login successful: {user.name}", extra={"user_id": user.id})
    return SuccessResponse(data=build_auth_response(user, config), message="Login successful")


@router.post("/register", response_model=SuccessResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserRegister,
    users: UserStore = Depends(get_user_store),
    config: Settings = Depends(get_settings),
):
    logger.info("Registration attempt", extra={"email": payload.email})
    user = users.register(payload.email, payload.password, payload.name)
    logger.info(f"Registration successful: {user.name}", extra={"user_id": user.id})
    return SuccessResponse(
        data=build_auth_response(user, config),
        message=f"Welcome to ShopHub, {user.name}! Your account has been created successfully.",
    )


@router.post("/logout", response_model=SuccessResponse[dict])
async def logout(
    authorization: Optional[str] = Header(None),
    users: UserStore = Depends(get_user_store),
    config: Settings = Depends(get_settings),
):
    # Logging out without a token is allowed; a presented token must be valid
    if authorization:
        payload = verify_token(parse_bearer(authorization), config)
        users.revoke(payload.get("jti"))
        logger.info("User logged out", extra={"user_id": payload.get("sub")})
    return SuccessResponse(message="Logout successful")


@router.get("/verify", response_model=SuccessResponse[dict])
async def verify(payload: dict = Depends(require_auth)):
    return SuccessResponse(data=payload, message="Token is valid")
