"""Auth API: registration, login, current user.

Learn: Routes for user authentication:
- POST /auth/register → create a new user account (role "user")
- POST /auth/login → email/password → JWT access token
- GET /auth/me → current user info (requires a token)

Both register and login failures are 400s. Login uses one message for
unknown email and wrong password.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.auth.dependencies import (
    RequestIdentity,
    get_current_identity,
    get_password_hasher,
    get_token_service,
)
from tasktrack.auth.jwt import TokenService
from tasktrack.auth.password import PasswordHasher
from tasktrack.config import settings
from tasktrack.db.engine import get_db
from tasktrack.errors import Unauthenticated
from tasktrack.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead
from tasktrack.services.auth_service import AuthService
from tasktrack.services.user_store import UserStore

router = APIRouter(prefix="/auth")


def _auth_svc(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(
        users=UserStore(db),
        hasher=hasher,
        tokens=tokens,
        min_password_length=settings.password_min_length,
    )


@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_auth_svc)):
    """Create a new user account."""
    return await svc.register(name=body.name, email=body.email, password=body.password)


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_auth_svc)):
    """Login with email and password → JWT access token."""
    token = await svc.login(email=body.email, password=body.password)
    return TokenResponse(token=token)


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: RequestIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    user = await UserStore(db).find_by_id(identity.id)
    if user is None:
        raise Unauthenticated()
    return user
