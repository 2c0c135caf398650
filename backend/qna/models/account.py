"""
QnA Backend — Account SQLAlchemy Model
========================================

What:  ORM model representing the `accounts` table.
Who:   Used by AccountService for registration and login; referenced by the
       owner columns of questions and answers.

Table Design:
    - SERIAL primary key, assigned by the database on insert
    - email is unique; the Postgres migration adds a format CHECK constraint
    - password holds the argon2 hash, never the plaintext
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from qna.database import Base


class Account(Base):
    """A registered account that can own questions and answers."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login name; unique across accounts",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Argon2 password hash",
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email='{self.email}')>"
