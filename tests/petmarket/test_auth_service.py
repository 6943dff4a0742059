"""Tests for AuthService."""

import os
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import bcrypt
import pytest
from jose import jwt

from petmarket.dao.user_dao import UserDAO
from petmarket.models.user import User
from petmarket.services import AuthenticationError, ConflictError, ValidationError
from petmarket.services.auth_service import (
    _ACCESS_TOKEN_EXPIRE,
    _ALGORITHM,
    _REFRESH_TOKEN_EXPIRE,
    AccessToken,
    AuthService,
    TokenPair,
)

TEST_SECRET = "test-jwt-secret-for-unit-tests"
JWT_ENV = {"PETMARKET_JWT_SECRET": TEST_SECRET}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_user(*, password: str = "hunter2hunter2", role: str = "buyer") -> User:
    return User(
        id=uuid.uuid4(),
        username="maria",
        email="maria@example.com",
        password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode(),
        role=role,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def _make_service() -> tuple[AuthService, UserDAO]:
    dao = UserDAO()
    return AuthService(dao), dao


def _token(sub: str | None, token_type: str, lifetime: timedelta, secret=TEST_SECRET) -> str:
    payload = {"type": token_type, "exp": datetime.now(timezone.utc) + lifetime}
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


# ---------------------------------------------------------------------------
# register
# ---------------------------------------------------------------------------


class TestRegister:
    async def test_creates_user_with_hashed_password(self):
        service, dao = _make_service()
        created = _make_user()
        dao.get_by_email = AsyncMock(return_value=None)
        dao.get_by_username = AsyncMock(return_value=None)
        dao.create = AsyncMock(return_value=created)
        session = AsyncMock()

        result = await service.register(
            session,
            username="maria",
            email="maria@example.com",
            password="correct horse",
            role="seller",
        )

        assert result is created
        kwargs = dao.create.call_args.kwargs
        assert kwargs["role"] == "seller"
        assert kwargs["password_hash"] != "correct horse"
        assert bcrypt.checkpw(b"correct horse", kwargs["password_hash"].encode())

    async def test_default_role_is_buyer(self):
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=None)
        dao.get_by_username = AsyncMock(return_value=None)
        dao.create = AsyncMock(return_value=_make_user())

        await service.register(
            AsyncMock(), username="maria", email="maria@example.com", password="12345678"
        )

        assert dao.create.call_args.kwargs["role"] == "buyer"

    async def test_admin_role_rejected(self):
        service, dao = _make_service()
        dao.create = AsyncMock()

        with pytest.raises(ValidationError, match="role must be one of"):
            await service.register(
                AsyncMock(),
                username="root",
                email="root@example.com",
                password="12345678",
                role="admin",
            )
        dao.create.assert_not_awaited()

    async def test_short_password(self):
        service, _ = _make_service()

        with pytest.raises(ValidationError, match="at least 8"):
            await service.register(
                AsyncMock(), username="maria", email="maria@example.com", password="short"
            )

    async def test_duplicate_email(self):
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=_make_user())
        dao.create = AsyncMock()

        with pytest.raises(ConflictError, match="email already registered"):
            await service.register(
                AsyncMock(), username="other", email="maria@example.com", password="12345678"
            )
        dao.create.assert_not_awaited()

    async def test_duplicate_username(self):
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=None)
        dao.get_by_username = AsyncMock(return_value=_make_user())

        with pytest.raises(ConflictError, match="username already taken"):
            await service.register(
                AsyncMock(), username="maria", email="new@example.com", password="12345678"
            )


# ---------------------------------------------------------------------------
# ensure_admin_exists
# ---------------------------------------------------------------------------


class TestEnsureAdminExists:
    async def test_upserts_admin(self):
        service, dao = _make_service()
        dao.upsert = AsyncMock(return_value=_make_user(role="admin"))

        env = {
            "PETMARKET_ADMIN_USERNAME": "admin",
            "PETMARKET_ADMIN_EMAIL": "admin@example.com",
            "PETMARKET_ADMIN_PASSWORD": "password123",
        }
        with patch.dict(os.environ, env, clear=False):
            await service.ensure_admin_exists(AsyncMock())

        kwargs = dao.upsert.call_args.kwargs
        assert kwargs["username"] == "admin"
        assert kwargs["role"] == "admin"
        assert bcrypt.checkpw(b"password123", kwargs["password_hash"].encode())

    @pytest.mark.parametrize(
        "missing",
        ["PETMARKET_ADMIN_USERNAME", "PETMARKET_ADMIN_EMAIL", "PETMARKET_ADMIN_PASSWORD"],
    )
    async def test_skips_when_incomplete(self, missing):
        service, dao = _make_service()
        dao.upsert = AsyncMock()

        env = {
            "PETMARKET_ADMIN_USERNAME": "admin",
            "PETMARKET_ADMIN_EMAIL": "admin@example.com",
            "PETMARKET_ADMIN_PASSWORD": "password123",
        }
        with patch.dict(os.environ, env, clear=False):
            os.environ.pop(missing)
            await service.ensure_admin_exists(AsyncMock())

        dao.upsert.assert_not_awaited()


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------


class TestLogin:
    async def test_success(self):
        user = _make_user(password="hunter2hunter2")
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=user)

        with patch.dict(os.environ, JWT_ENV):
            result = await service.login(AsyncMock(), user.email, "hunter2hunter2")

        assert isinstance(result, TokenPair)
        assert result.token_type == "bearer"
        access = jwt.decode(result.access_token, TEST_SECRET, algorithms=[_ALGORITHM])
        refresh = jwt.decode(result.refresh_token, TEST_SECRET, algorithms=[_ALGORITHM])
        assert access["sub"] == refresh["sub"] == str(user.id)
        assert access["type"] == "access"
        assert refresh["type"] == "refresh"

        now = datetime.now(timezone.utc)
        access_left = datetime.fromtimestamp(access["exp"], tz=timezone.utc) - now
        refresh_left = datetime.fromtimestamp(refresh["exp"], tz=timezone.utc) - now
        assert abs(access_left - _ACCESS_TOKEN_EXPIRE) < timedelta(seconds=10)
        assert abs(refresh_left - _REFRESH_TOKEN_EXPIRE) < timedelta(seconds=10)

    async def test_unknown_email(self):
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=None)

        with (
            patch.dict(os.environ, JWT_ENV),
            pytest.raises(AuthenticationError, match="invalid credentials"),
        ):
            await service.login(AsyncMock(), "nobody@example.com", "whatever")

    async def test_wrong_password(self):
        user = _make_user(password="right-password")
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=user)

        with (
            patch.dict(os.environ, JWT_ENV),
            pytest.raises(AuthenticationError, match="invalid credentials"),
        ):
            await service.login(AsyncMock(), user.email, "wrong-password")

    async def test_missing_secret(self):
        user = _make_user()
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=user)

        with (
            patch.dict(os.environ, {}, clear=False),
            pytest.raises(RuntimeError, match="PETMARKET_JWT_SECRET"),
        ):
            os.environ.pop("PETMARKET_JWT_SECRET", None)
            await service.login(AsyncMock(), user.email, "hunter2hunter2")


# ---------------------------------------------------------------------------
# refresh
# ---------------------------------------------------------------------------


class TestRefresh:
    async def test_success_without_database(self):
        service, dao = _make_service()
        dao.get_by_id = AsyncMock()
        sub = str(uuid.uuid4())

        with patch.dict(os.environ, JWT_ENV):
            result = service.refresh(_token(sub, "refresh", timedelta(days=1)))

        assert isinstance(result, AccessToken)
        payload = jwt.decode(result.access_token, TEST_SECRET, algorithms=[_ALGORITHM])
        assert payload["sub"] == sub
        assert payload["type"] == "access"
        dao.get_by_id.assert_not_awaited()

    @pytest.mark.parametrize(
        "token, match",
        [
            ("not-a-jwt", "invalid refresh token"),
            (_token(str(uuid.uuid4()), "refresh", timedelta(hours=-1)), "invalid refresh token"),
            (
                _token(str(uuid.uuid4()), "refresh", timedelta(days=1), secret="other"),
                "invalid refresh token",
            ),
            (_token(str(uuid.uuid4()), "access", timedelta(minutes=5)), "invalid token type"),
            (_token(None, "refresh", timedelta(days=1)), "invalid token payload"),
        ],
        ids=["garbage", "expired", "wrong-secret", "access-token", "no-sub"],
    )
    async def test_rejected(self, token, match):
        service, _ = _make_service()

        with (
            patch.dict(os.environ, JWT_ENV),
            pytest.raises(AuthenticationError, match=match),
        ):
            service.refresh(token)


# ---------------------------------------------------------------------------
# get_current_user
# ---------------------------------------------------------------------------


class TestGetCurrentUser:
    async def test_success(self):
        user = _make_user()
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=user)
        session = AsyncMock()

        with patch.dict(os.environ, JWT_ENV):
            result = await service.get_current_user(
                session, _token(str(user.id), "access", timedelta(minutes=5))
            )

        assert result is user
        dao.get_by_id.assert_awaited_once_with(session, user.id)

    async def test_refresh_token_rejected(self):
        service, _ = _make_service()

        with (
            patch.dict(os.environ, JWT_ENV),
            pytest.raises(AuthenticationError, match="invalid token type"),
        ):
            await service.get_current_user(
                AsyncMock(), _token(str(uuid.uuid4()), "refresh", timedelta(days=1))
            )

    async def test_malformed_sub(self):
        service, _ = _make_service()

        with (
            patch.dict(os.environ, JWT_ENV),
            pytest.raises(AuthenticationError, match="invalid token payload"),
        ):
            await service.get_current_user(
                AsyncMock(), _token("not-a-uuid", "access", timedelta(minutes=5))
            )

    async def test_deleted_user(self):
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=None)

        with (
            patch.dict(os.environ, JWT_ENV),
            pytest.raises(AuthenticationError, match="user not found"),
        ):
            await service.get_current_user(
                AsyncMock(), _token(str(uuid.uuid4()), "access", timedelta(minutes=5))
            )
