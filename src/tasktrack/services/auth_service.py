"""Auth service: registration and login.

Learn: bcrypt is deliberately slow (tens of ms per call), so hashing and
verification run in a worker thread via asyncio.to_thread; the event loop
keeps serving other requests meanwhile.

Login failures are indistinguishable to the client: unknown email and
wrong password both raise InvalidCredentials with the same message, and
both pay for one bcrypt check.
"""

import asyncio

import structlog

from tasktrack.auth.jwt import TokenService
from tasktrack.auth.password import PasswordHasher
from tasktrack.db.models import User
from tasktrack.errors import InvalidCredentials, ValidationError
from tasktrack.services.user_store import UserStore
from tasktrack.services.validation import validate_registration

logger = structlog.get_logger()


class AuthService:
    """Registers users and exchanges credentials for access tokens."""

    def __init__(
        self,
        users: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        min_password_length: int = 6,
    ):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.min_password_length = min_password_length

    async def register(self, name: str, email: str, password: str) -> User:
        errors = validate_registration(
            name, email, password, min_password_length=self.min_password_length
        )
        if errors:
            raise ValidationError(errors)

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        return await self.users.create(
            name=name.strip(), email=email, password_hash=password_hash
        )

    async def login(self, email: str, password: str) -> str:
        """Return a signed access token for valid credentials."""
        user = await self.users.find_by_email(email)

        if user is None:
            await asyncio.to_thread(self.hasher.verify_dummy, password)
            logger.info("auth.login_failed", reason="unknown_email")
            raise InvalidCredentials()

        if not await asyncio.to_thread(self.hasher.verify, password, user.password_hash):
            logger.info("auth.login_failed", reason="wrong_password", user_id=str(user.id))
            raise InvalidCredentials()

        logger.info("auth.login_succeeded", user_id=str(user.id))
        return self.tokens.issue(str(user.id), user.role)
