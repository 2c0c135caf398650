"""
QnA Backend — Questions Route Handlers
========================================

What:  CRUD endpoints for questions.
How:   Handlers stay thin: read the request, call QuestionService, shape the
       response. Errors propagate as QnAError subclasses to the global
       handlers in main.py.

Routes:
    GET    /questions              list (offset/limit query parameters)
    GET    /questions/{id}         single question
    POST   /questions              create, authenticated          → 201
    PUT    /questions/{id}         update, authenticated owner
    DELETE /questions/{id}         delete, authenticated owner
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from qna.database import get_db_session
from qna.dependencies import get_current_session, get_question_service
from qna.exceptions import QuestionNotFoundError, UnauthorizedError
from qna.schemas.auth import Session
from qna.schemas.common import ErrorResponse, MessageResponse
from qna.schemas.pagination import Pagination
from qna.schemas.question import QuestionCreate, QuestionResponse, QuestionUpdate
from qna.services.question_service import QuestionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Questions"])


@router.get(
    "/questions",
    response_model=List[QuestionResponse],
    responses={400: {"description": "Invalid pagination parameters", "model": ErrorResponse}},
    summary="List questions",
)
async def get_questions(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    service: QuestionService = Depends(get_question_service),
) -> List[QuestionResponse]:
    """
    Return questions in id order.

    Example:
        GET /questions?offset=20&limit=10

    `offset` defaults to 0; without `limit` every remaining question is
    returned. Non-integer or negative values answer 400.
    """
    pagination = Pagination.extract(request.query_params)
    questions = await service.get_questions(db, pagination)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.get(
    "/questions/{question_id}",
    response_model=QuestionResponse,
    responses={404: {"description": "Question not found", "model": ErrorResponse}},
    summary="Get a single question",
)
async def get_question(
    question_id: Annotated[int, Path(gt=0)],
    db: AsyncSession = Depends(get_db_session),
    service: QuestionService = Depends(get_question_service),
) -> QuestionResponse:
    question = await service.get_question(db, question_id)
    return QuestionResponse.model_validate(question)


@router.post(
    "/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"description": "Missing or invalid session", "model": ErrorResponse},
        500: {"description": "Censor API failure", "model": ErrorResponse},
    },
    summary="Create a question",
)
async def add_question(
    body: QuestionCreate,
    session: Session = Depends(get_current_session),
    db: AsyncSession = Depends(get_db_session),
    service: QuestionService = Depends(get_question_service),
) -> QuestionResponse:
    """Title and content are censored before storage; the session's account owns the row."""
    question = await service.add_question(db, session.account_id, body)
    return QuestionResponse.model_validate(question)


@router.put(
    "/questions/{question_id}",
    response_model=QuestionResponse,
    responses={
        401: {"description": "Not the owner, or no valid session", "model": ErrorResponse},
        404: {"description": "Question not found", "model": ErrorResponse},
    },
    summary="Update an owned question",
)
async def update_question(
    question_id: Annotated[int, Path(gt=0)],
    body: QuestionUpdate,
    session: Session = Depends(get_current_session),
    db: AsyncSession = Depends(get_db_session),
    service: QuestionService = Depends(get_question_service),
) -> QuestionResponse:
    if not await service.is_question_owner(db, question_id, session.account_id):
        logger.info(
            "Account %s denied update of question %s", session.account_id, question_id
        )
        raise UnauthorizedError()

    question = await service.update_question(db, session.account_id, body, question_id)
    return QuestionResponse.model_validate(question)


@router.delete(
    "/questions/{question_id}",
    response_model=MessageResponse,
    responses={
        401: {"description": "Not the owner, or no valid session", "model": ErrorResponse},
        404: {"description": "Question not found", "model": ErrorResponse},
    },
    summary="Delete an owned question",
)
async def delete_question(
    question_id: Annotated[int, Path(gt=0)],
    session: Session = Depends(get_current_session),
    db: AsyncSession = Depends(get_db_session),
    service: QuestionService = Depends(get_question_service),
) -> MessageResponse:
    """Deletes the question and, through the foreign key cascade, its answers."""
    if not await service.is_question_owner(db, question_id, session.account_id):
        logger.info(
            "Account %s denied delete of question %s", session.account_id, question_id
        )
        raise UnauthorizedError()

    if not await service.delete_question(db, session.account_id, question_id):
        raise QuestionNotFoundError(question_id)

    return MessageResponse(message="Question deleted")
