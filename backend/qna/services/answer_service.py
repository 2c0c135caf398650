"""
QnA Backend — Answer Service
==============================

What:  Stores censored answers for existing questions and lists them.
How:   Same shape as QuestionService: shared TextCensor, per-call AsyncSession.
Who:   Called by the answers route handlers.

Answers are not owner-checked: any authenticated account may answer any
question. The route verifies the question exists first; a question deleted
in between surfaces as a foreign key violation (DatabaseQueryError → 422).
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from qna.exceptions import DatabaseQueryError
from qna.models.answer import Answer
from qna.schemas.answer import AnswerCreate
from qna.schemas.pagination import Pagination
from qna.services.censor_base import TextCensor

logger = logging.getLogger(__name__)


class AnswerService:
    """Business logic for answers attached to a question."""

    def __init__(self, censor: TextCensor):
        self.censor = censor

    async def add_answer(
        self,
        db: AsyncSession,
        account_id: int,
        question_id: int,
        answer: AnswerCreate,
    ) -> Answer:
        """
        Censor the content and insert the answer.

        Raises:
            ExternalAPIError (and subclasses): censoring failed; nothing was written
            DatabaseQueryError: insert failed (e.g. question no longer exists)
        """
        content = await self.censor.censor(answer.content)

        row = Answer(content=content, question_id=question_id, account_id=account_id)
        try:
            db.add(row)
            await db.flush()
            await db.refresh(row)
        except SQLAlchemyError as e:
            logger.error("Database error adding answer to question %s: %s", question_id, str(e))
            raise DatabaseQueryError.from_sqlalchemy(
                e, question_id=question_id, account_id=account_id
            ) from e

        logger.info("Answer %s added to question %s by account %s", row.id, question_id, account_id)
        return row

    async def get_answers(
        self,
        db: AsyncSession,
        question_id: int,
        pagination: Pagination,
    ) -> List[Answer]:
        """One page of a question's answers, oldest first."""
        query = (
            select(Answer)
            .where(Answer.question_id == question_id)
            .order_by(Answer.id)
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error listing answers of question %s: %s", question_id, str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, question_id=question_id) from e
        return list(result.scalars().all())
