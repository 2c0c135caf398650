"""
QnA Backend — Account Service
===============================

What:  The account store behind /register and /login.
How:   Passwords are hashed (auth_service.hash_password) before insert;
       login compares against the stored hash.

Unknown email and wrong password raise the same WrongCredentialsError so a
client cannot discover which emails are registered.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from qna.exceptions import DatabaseQueryError, WrongCredentialsError
from qna.models.account import Account
from qna.schemas.auth import AccountCredentials
from qna.services.auth_service import hash_password, verify_password

logger = logging.getLogger(__name__)


class AccountService:
    """Account registration and credential checks."""

    async def add_account(self, db: AsyncSession, credentials: AccountCredentials) -> Account:
        """
        Store a new account with a hashed password.

        Raises:
            DatabaseQueryError: insert failed; a duplicate email is a
                constraint violation (→ 422)
        """
        account = Account(email=credentials.email, password=hash_password(credentials.password))
        try:
            db.add(account)
            await db.flush()
        except SQLAlchemyError as e:
            logger.warning("Could not register account '%s': %s", credentials.email, str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, email=credentials.email) from e

        logger.info("Account %s registered", account.id)
        return account

    async def get_account(self, db: AsyncSession, email: str) -> Optional[Account]:
        try:
            result = await db.execute(select(Account).where(Account.email == email))
        except SQLAlchemyError as e:
            logger.error("Database error looking up account: %s", str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, email=email) from e
        return result.scalar_one_or_none()

    async def authenticate(self, db: AsyncSession, credentials: AccountCredentials) -> Account:
        """
        Return the account matching the credentials.

        Raises:
            WrongCredentialsError: unknown email or wrong password
        """
        account = await self.get_account(db, credentials.email)
        if account is None or not verify_password(credentials.password, account.password):
            raise WrongCredentialsError(context={"email": credentials.email})
        return account


# Singleton instance
account_service = AccountService()
