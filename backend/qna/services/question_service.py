"""
QnA Backend — Question Service (Ownership-Checked Store)
==========================================================

What:  Reads and writes questions, censoring text before it is stored and
       filtering every mutation on the owning account.
How:   Stateless service holding a shared TextCensor; every method receives
       the request's AsyncSession.
Who:   Called by the questions route handlers.

Mutating Request Flow:
    authenticate (dependency) → authorize (is_question_owner, in the route)
    → censor title + content concurrently → owner-filtered SQL statement

    Censoring finishes before the first SQL statement is issued, so a censor
    failure never leaves a partial write behind. The ownership check and the
    UPDATE/DELETE are separate statements without a wrapping transaction;
    the `account_id` filter inside the statement is what keeps another
    account from mutating the row if ownership changes in between.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from qna.exceptions import DatabaseQueryError, QuestionNotFoundError
from qna.models.question import Question
from qna.schemas.pagination import Pagination
from qna.schemas.question import QuestionCreate, QuestionUpdate
from qna.services.censor_base import TextCensor

logger = logging.getLogger(__name__)


class QuestionService:
    """
    Business logic for the questions resource.

    Error Handling Strategy:
        SQLAlchemy failures are wrapped in DatabaseQueryError; censor
        failures propagate with their own type (ExternalAPIError family);
        missing rows become QuestionNotFoundError.
    """

    def __init__(self, censor: TextCensor):
        self.censor = censor

    async def _censor_pair(self, title: str, content: str) -> Tuple[str, str]:
        """Censor title and content concurrently; fails if either call fails."""
        censored_title, censored_content = await asyncio.gather(
            self.censor.censor(title),
            self.censor.censor(content),
        )
        return censored_title, censored_content

    async def get_questions(self, db: AsyncSession, pagination: Pagination) -> List[Question]:
        """
        Return one page of questions in primary-key order.

        Args:
            db: Async database session
            pagination: offset and optional limit; limit None means no LIMIT

        Returns:
            At most `limit` questions starting at `offset`; an empty list
            when the offset is past the end.
        """
        query = (
            select(Question)
            .order_by(Question.id)
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error listing questions: %s", str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, operation="get_questions") from e

        questions = list(result.scalars().all())
        logger.debug("Fetched %d question(s) for %s", len(questions), pagination)
        return questions

    async def get_question(self, db: AsyncSession, question_id: int) -> Question:
        """
        Retrieve a single question by id.

        Raises:
            QuestionNotFoundError: no row with this id (→ 404)
            DatabaseQueryError: query execution failed
        """
        try:
            result = await db.execute(select(Question).where(Question.id == question_id))
        except SQLAlchemyError as e:
            logger.error("Database error fetching question %s: %s", question_id, str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, question_id=question_id) from e

        question = result.scalar_one_or_none()
        if question is None:
            raise QuestionNotFoundError(question_id)
        return question

    async def is_question_owner(self, db: AsyncSession, question_id: int, account_id: int) -> bool:
        """
        Check whether `account_id` owns the question.

        Returns False for another owner. A missing question is not "False":
        it raises QuestionNotFoundError, so callers branch on both outcomes.
        """
        try:
            result = await db.execute(
                select(Question.account_id).where(Question.id == question_id)
            )
        except SQLAlchemyError as e:
            logger.error("Database error checking owner of question %s: %s", question_id, str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, question_id=question_id) from e

        # account_id is NOT NULL, so None can only mean the row is missing
        owner_id: Optional[int] = result.scalar_one_or_none()
        if owner_id is None:
            raise QuestionNotFoundError(question_id)
        return owner_id == account_id

    async def add_question(
        self,
        db: AsyncSession,
        account_id: int,
        question: QuestionCreate,
    ) -> Question:
        """
        Censor and insert a new question owned by `account_id`.

        Returns:
            The persisted Question with its server-assigned id.

        Raises:
            ExternalAPIError (and subclasses): censoring failed; nothing was written
            DatabaseQueryError: the insert failed
        """
        title, content = await self._censor_pair(question.title, question.content)

        row = Question(title=title, content=content, tags=question.tags, account_id=account_id)
        try:
            db.add(row)
            await db.flush()
            await db.refresh(row)
        except SQLAlchemyError as e:
            logger.error("Database error adding question: %s", str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, account_id=account_id) from e

        logger.info("Question %s created by account %s", row.id, account_id)
        return row

    async def update_question(
        self,
        db: AsyncSession,
        account_id: int,
        question: QuestionUpdate,
        question_id: int,
    ) -> Question:
        """
        Censor and overwrite title, content and tags of an owned question.

        The caller is expected to have run is_question_owner first. The
        statement still filters on `account_id`; when it matches no row
        (deleted meanwhile, or not owned) QuestionNotFoundError is raised.
        """
        title, content = await self._censor_pair(question.title, question.content)

        # Owner filter in the statement itself, not only in is_question_owner:
        # a row that changed hands after the route's check is left alone
        statement = (
            update(Question)
            .where(Question.id == question_id, Question.account_id == account_id)
            .values(title=title, content=content, tags=question.tags)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(statement)
            # Zero rows: deleted meanwhile or not owned, both reported as not found
            if result.rowcount == 0:
                raise QuestionNotFoundError(question_id)
            # Bulk UPDATE skips the identity map; populate_existing reloads a
            # Question this session may already hold with the old values
            refreshed = await db.execute(
                select(Question)
                .where(Question.id == question_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating question %s: %s", question_id, str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, question_id=question_id) from e

        logger.info("Question %s updated by account %s", question_id, account_id)
        return refreshed.scalar_one()

    async def delete_question(self, db: AsyncSession, account_id: int, question_id: int) -> bool:
        """
        Delete an owned question (its answers go with it).

        Returns:
            True if a row was deleted; False when nothing matched. False does
            not tell "missing" from "not yours" apart; is_question_owner does.
        """
        # Same owner filter as update_question; rowcount 0 maps to False
        try:
            result = await db.execute(
                delete(Question)
                .where(Question.id == question_id, Question.account_id == account_id)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting question %s: %s", question_id, str(e))
            raise DatabaseQueryError.from_sqlalchemy(e, question_id=question_id) from e

        if result.rowcount == 0:
            logger.debug("Delete of question %s by account %s matched no row", question_id, account_id)
            return False

        logger.info("Question %s deleted by account %s", question_id, account_id)
        return True
