"""
QnA Backend — FastAPI Dependencies
====================================

What:  Injectable providers for the censor, the resource services and the
       current session.
How:   Route handlers declare `Depends(...)` on these; tests replace them
       through `app.dependency_overrides`.

Session Guard:
    get_current_session reads the `Authorization` header, strips an optional
    "Bearer " prefix and verifies the token. A missing header and an
    unverifiable token both answer 401 without touching the database.
"""

import logging
from typing import Optional

from fastapi import Depends, Header

from qna.exceptions import UnauthorizedError
from qna.schemas.auth import Session
from qna.services.answer_service import AnswerService
from qna.services.auth_service import verify_token
from qna.services.bad_words_service import bad_words_service
from qna.services.censor_base import TextCensor
from qna.services.question_service import QuestionService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_censor() -> TextCensor:
    """The process-wide censoring client."""
    return bad_words_service


def get_question_service(censor: TextCensor = Depends(get_censor)) -> QuestionService:
    return QuestionService(censor)


def get_answer_service(censor: TextCensor = Depends(get_censor)) -> AnswerService:
    return AnswerService(censor)


async def get_current_session(
    authorization: Optional[str] = Header(default=None),
) -> Session:
    """
    Resolve the caller's Session from the Authorization header.

    Raises:
        UnauthorizedError: header missing
        CannotDecryptTokenError: token rejected (tampered, expired, not yet valid)
    """
    if not authorization:
        raise UnauthorizedError("missing request header: authorization")

    token = authorization
    if token.startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):]

    return verify_token(token.strip())
