"""
QnA Backend — Authentication Service Tests
============================================

What we test:
    ✅ Password hashing and verification
    ✅ Token issue/verify round trip and the [nbf, exp) window
    ✅ Expired, premature, tampered and foreign-key tokens are rejected
    ✅ Account registration, duplicate email, login
    ✅ get_current_session header handling
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from qna.config import settings
from qna.dependencies import get_current_session
from qna.exceptions import (
    CannotDecryptTokenError,
    DatabaseQueryError,
    UnauthorizedError,
    WrongCredentialsError,
)
from qna.schemas.auth import AccountCredentials
from qna.services.account_service import AccountService
from qna.services.auth_service import (
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)


class TestPasswordHashing:
    """Tests for hash_password / verify_password."""

    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = hash_password("hunter2")
        assert hashed != "hunter2"
        assert hashed.startswith("$argon2")
        assert verify_password("hunter2", hashed) is True
        assert verify_password("hunter3", hashed) is False

    def test_same_password_hashes_differently(self):
        assert hash_password("hunter2") != hash_password("hunter2")


class TestSessionTokens:
    """Tests for issue_token / verify_token."""

    def test_round_trip(self):
        session = verify_token(issue_token(42))
        assert session.account_id == 42
        assert session.exp - session.nbf == timedelta(hours=settings.session_lifetime_hours)

    def test_window_start_is_inclusive(self):
        start = datetime(2030, 1, 1, tzinfo=timezone.utc)
        session = verify_token(issue_token(7, now=start), now=start)
        assert session.account_id == 7

    def test_window_end_is_exclusive(self):
        start = datetime(2030, 1, 1, tzinfo=timezone.utc)
        token = issue_token(7, now=start)
        end = start + timedelta(hours=settings.session_lifetime_hours)

        assert verify_token(token, now=end - timedelta(seconds=1)).account_id == 7
        with pytest.raises(CannotDecryptTokenError) as exc_info:
            verify_token(token, now=end)
        assert exc_info.value.reason == "expired"

    def test_expired_token(self):
        token = issue_token(1, now=datetime.now(timezone.utc) - timedelta(days=2))
        with pytest.raises(CannotDecryptTokenError) as exc_info:
            verify_token(token)
        assert exc_info.value.reason == "expired"

    def test_not_yet_valid_token(self):
        token = issue_token(1, now=datetime.now(timezone.utc) + timedelta(hours=1))
        with pytest.raises(CannotDecryptTokenError) as exc_info:
            verify_token(token)
        assert exc_info.value.reason == "not yet valid"

    def test_tampered_token(self):
        token = issue_token(1)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[:-4] + "AAAA"])
        with pytest.raises(CannotDecryptTokenError) as exc_info:
            verify_token(tampered)
        assert exc_info.value.reason == "invalid"

    def test_token_signed_with_another_key(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"account_id": 1, "nbf": now, "exp": now + timedelta(hours=1)},
            "some-other-key",
            algorithm="HS256",
        )
        with pytest.raises(CannotDecryptTokenError):
            verify_token(token)

    def test_token_without_account_id(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"nbf": now, "exp": now + timedelta(hours=1)},
            settings.session_token_key,
            algorithm=settings.session_token_algorithm,
        )
        with pytest.raises(CannotDecryptTokenError):
            verify_token(token)

    def test_garbage(self):
        with pytest.raises(CannotDecryptTokenError):
            verify_token("not-a-token")

    def test_rejection_is_an_unauthorized_error(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            verify_token("not-a-token")
        assert exc_info.value.message == "auth token could not be deciphered"


class TestCurrentSessionDependency:
    """Tests for the Authorization header guard."""

    @pytest.mark.asyncio
    async def test_missing_header(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            await get_current_session(authorization=None)
        assert "authorization" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_raw_token(self):
        session = await get_current_session(authorization=issue_token(5))
        assert session.account_id == 5

    @pytest.mark.asyncio
    async def test_bearer_token(self):
        session = await get_current_session(authorization=f"Bearer {issue_token(5)}")
        assert session.account_id == 5


class TestAccountService:
    """Tests for AccountService against the SQLite test database."""

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_register_and_authenticate(self, db_session):
        credentials = AccountCredentials(email="alice@example.com", password="s3cret")

        account = await self.service.add_account(db_session, credentials)
        await db_session.commit()

        assert account.id is not None
        assert account.password != "s3cret"

        logged_in = await self.service.authenticate(db_session, credentials)
        assert logged_in.id == account.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, db_session):
        await self.service.add_account(
            db_session, AccountCredentials(email="alice@example.com", password="s3cret")
        )
        with pytest.raises(WrongCredentialsError):
            await self.service.authenticate(
                db_session, AccountCredentials(email="alice@example.com", password="wrong")
            )

    @pytest.mark.asyncio
    async def test_unknown_email(self, db_session):
        assert await self.service.get_account(db_session, "nobody@example.com") is None
        with pytest.raises(WrongCredentialsError):
            await self.service.authenticate(
                db_session, AccountCredentials(email="nobody@example.com", password="x")
            )

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session):
        credentials = AccountCredentials(email="alice@example.com", password="s3cret")
        await self.service.add_account(db_session, credentials)
        await db_session.commit()

        with pytest.raises(DatabaseQueryError) as exc_info:
            await self.service.add_account(db_session, credentials)
        assert exc_info.value.constraint_violation is True
