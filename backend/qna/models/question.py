"""
QnA Backend — Question SQLAlchemy Model
=========================================

What:  ORM model representing the `questions` table.
Who:   Used by QuestionService for CRUD operations and by Alembic.

Table Design:
    - SERIAL primary key: ids are assigned by the database, never by the app
    - title/content: stored only after the censoring pass
    - tags: TEXT[] on PostgreSQL, JSON elsewhere (keeps the model usable on SQLite)
    - account_id: owner; update and delete statements filter on it
    - created_on: server-side insertion timestamp

Invariants:
    Once inserted, `id` and `account_id` never change. Updates only touch
    title, content and tags.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from qna.database import Base

# TEXT[] on PostgreSQL; JSON list on other dialects
TagList = JSON().with_variant(ARRAY(Text), "postgresql")


class Question(Base):
    """A question asked by an account."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Censored question title",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Censored question body",
    )

    tags: Mapped[Optional[List[str]]] = mapped_column(
        TagList,
        nullable=True,
        comment="Ordered list of free-form tags",
    )

    created_on: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
        comment="Owner; only this account may update or delete the question",
    )

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, account_id={self.account_id}, title='{self.title}')>"
