"""
QnA Backend — Answers Route Handlers
======================================

Routes:
    POST /questions/{id}/answers     add a censored answer, authenticated → 201
    GET  /questions/{id}/answers     list a question's answers (offset/limit)
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from qna.database import get_db_session
from qna.dependencies import get_answer_service, get_current_session, get_question_service
from qna.schemas.answer import AnswerCreate, AnswerResponse
from qna.schemas.auth import Session
from qna.schemas.common import ErrorResponse
from qna.schemas.pagination import Pagination
from qna.services.answer_service import AnswerService
from qna.services.question_service import QuestionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Answers"])


@router.post(
    "/questions/{question_id}/answers",
    response_model=AnswerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"description": "Missing or invalid session", "model": ErrorResponse},
        404: {"description": "Question not found", "model": ErrorResponse},
        500: {"description": "Censor API failure", "model": ErrorResponse},
    },
    summary="Answer a question",
)
async def add_answer(
    question_id: Annotated[int, Path(gt=0)],
    body: AnswerCreate,
    session: Session = Depends(get_current_session),
    db: AsyncSession = Depends(get_db_session),
    questions: QuestionService = Depends(get_question_service),
    answers: AnswerService = Depends(get_answer_service),
) -> AnswerResponse:
    """Any authenticated account may answer; the question only has to exist."""
    await questions.get_question(db, question_id)
    answer = await answers.add_answer(db, session.account_id, question_id, body)
    return AnswerResponse.model_validate(answer)


@router.get(
    "/questions/{question_id}/answers",
    response_model=List[AnswerResponse],
    responses={
        400: {"description": "Invalid pagination parameters", "model": ErrorResponse},
        404: {"description": "Question not found", "model": ErrorResponse},
    },
    summary="List answers of a question",
)
async def get_answers(
    question_id: Annotated[int, Path(gt=0)],
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    questions: QuestionService = Depends(get_question_service),
    answers: AnswerService = Depends(get_answer_service),
) -> List[AnswerResponse]:
    pagination = Pagination.extract(request.query_params)
    await questions.get_question(db, question_id)
    rows = await answers.get_answers(db, question_id, pagination)
    return [AnswerResponse.model_validate(a) for a in rows]
