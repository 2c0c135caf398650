"""
QnA Backend — Answer SQLAlchemy Model
=======================================

What:  ORM model representing the `answers` table.

Table Design:
    - question_id references questions(id); the database rejects answers
      for questions that do not exist, and deleting a question removes
      its answers (ON DELETE CASCADE)
    - account_id: the answering account
"""

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, Text, func
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from qna.database import Base


class Answer(Base):
    """An answer posted to a question."""

    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    content: Mapped[str] = mapped_column(Text, nullable=False, comment="Censored answer body")

    created_on: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Answer(id={self.id}, question_id={self.question_id}, account_id={self.account_id})>"
