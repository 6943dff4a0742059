"""AuthService — registration, JWT authentication and admin bootstrap."""

import os
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import structlog
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.user_dao import UserDAO
from petmarket.models.user import User
from petmarket.services import AuthenticationError, ConflictError, ValidationError

log = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def _verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


# ---------------------------------------------------------------------------
# JWT configuration
# ---------------------------------------------------------------------------

# Hash checked on the unknown-email path so both failures cost one bcrypt round.
_DUMMY_HASH = bcrypt.hashpw(b"dummy", bcrypt.gensalt()).decode()

_ALGORITHM = "HS256"
_ACCESS_TOKEN_EXPIRE = timedelta(minutes=30)
_REFRESH_TOKEN_EXPIRE = timedelta(days=7)
_MIN_PASSWORD_LENGTH = 8
_SELF_SERVICE_ROLES = ("seller", "buyer")

_ENV_JWT_SECRET = "PETMARKET_JWT_SECRET"
_ENV_ADMIN_USERNAME = "PETMARKET_ADMIN_USERNAME"
_ENV_ADMIN_EMAIL = "PETMARKET_ADMIN_EMAIL"
_ENV_ADMIN_PASSWORD = "PETMARKET_ADMIN_PASSWORD"


def _get_secret() -> str:
    secret = os.environ.get(_ENV_JWT_SECRET)
    if not secret:
        raise RuntimeError(f"{_ENV_JWT_SECRET} environment variable is required")
    return secret


def _encode(sub: str, token_type: str, lifetime: timedelta, secret: str) -> str:
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {"sub": sub, "type": token_type, "exp": now + lifetime},
        secret,
        algorithm=_ALGORITHM,
    )


class TokenPair:
    """Access + refresh token pair returned by login."""

    __slots__ = ("access_token", "refresh_token", "token_type")

    def __init__(self, access_token: str, refresh_token: str) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.token_type = "bearer"


class AccessToken:
    """Single access token returned by refresh."""

    __slots__ = ("access_token", "token_type")

    def __init__(self, access_token: str) -> None:
        self.access_token = access_token
        self.token_type = "bearer"


class AuthService:
    """Stateless authentication service: accounts, tokens, bearer verification."""

    def __init__(self, user_dao: UserDAO) -> None:
        self._user_dao = user_dao

    async def ensure_admin_exists(self, session: AsyncSession) -> None:
        """Create the bootstrap admin from ``PETMARKET_ADMIN_*``; skip if any is unset."""
        username = os.environ.get(_ENV_ADMIN_USERNAME)
        email = os.environ.get(_ENV_ADMIN_EMAIL)
        password = os.environ.get(_ENV_ADMIN_PASSWORD)

        if not all([username, email, password]):
            return

        await self._user_dao.upsert(
            session,
            username=username,
            email=email,
            password_hash=_hash_password(password),
            role="admin",
        )
        log.info("auth.admin_ensured", username=username)

    async def register(
        self,
        session: AsyncSession,
        *,
        username: str,
        email: str,
        password: str,
        role: str = "buyer",
    ) -> User:
        """Create an account. Admins can only be bootstrapped, never self-registered."""
        if role not in _SELF_SERVICE_ROLES:
            raise ValidationError(f"role must be one of: {', '.join(_SELF_SERVICE_ROLES)}")
        if len(password) < _MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"password must be at least {_MIN_PASSWORD_LENGTH} characters"
            )
        if await self._user_dao.get_by_email(session, email) is not None:
            raise ConflictError("email already registered")
        if await self._user_dao.get_by_username(session, username) is not None:
            raise ConflictError("username already taken")

        user = await self._user_dao.create(
            session,
            username=username,
            email=email,
            password_hash=_hash_password(password),
            role=role,
        )
        log.info("auth.registered", user_id=str(user.id), role=role)
        return user

    async def login(self, session: AsyncSession, email: str, password: str) -> TokenPair:
        """Verify credentials and return an access + refresh token pair.

        Does not distinguish "unknown email" from "wrong password".
        """
        user = await self._user_dao.get_by_email(session, email)
        if user is None:
            _verify_password(password, _DUMMY_HASH)
            raise AuthenticationError("invalid credentials")
        if not _verify_password(password, user.password_hash):
            raise AuthenticationError("invalid credentials")

        secret = _get_secret()
        return TokenPair(
            _encode(str(user.id), "access", _ACCESS_TOKEN_EXPIRE, secret),
            _encode(str(user.id), "refresh", _REFRESH_TOKEN_EXPIRE, secret),
        )

    def refresh(self, refresh_token: str) -> AccessToken:
        """Validate a refresh token and issue a new access token (no database hit)."""
        secret = _get_secret()
        try:
            payload = jwt.decode(refresh_token, secret, algorithms=[_ALGORITHM])
        except JWTError:
            raise AuthenticationError("invalid refresh token")

        if payload.get("type") != "refresh":
            raise AuthenticationError("invalid token type")

        sub = payload.get("sub")
        if not sub:
            raise AuthenticationError("invalid token payload")

        return AccessToken(_encode(sub, "access", _ACCESS_TOKEN_EXPIRE, secret))

    async def get_current_user(self, session: AsyncSession, token: str) -> User:
        """Decode an access token and return the corresponding user.

        Raises :class:`AuthenticationError` on invalid token or unknown user.
        """
        secret = _get_secret()
        try:
            payload = jwt.decode(token, secret, algorithms=[_ALGORITHM])
        except JWTError:
            raise AuthenticationError("invalid access token")

        if payload.get("type") != "access":
            raise AuthenticationError("invalid token type")

        try:
            user_id = uuid.UUID(payload["sub"])
        except (KeyError, ValueError):
            raise AuthenticationError("invalid token payload")

        user = await self._user_dao.get_by_id(session, user_id)
        if user is None:
            raise AuthenticationError("user not found")

        return user
