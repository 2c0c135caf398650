"""
QnA Backend — Registration & Login Routes
===========================================

Routes:
    POST /register   store a new account                   → 201 {"message"}
    POST /login      exchange credentials for a token      → 200 "<token>"

The login response body is the token as a bare JSON string, which clients
send back verbatim in the Authorization header.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from qna.database import get_db_session
from qna.schemas.auth import AccountCredentials
from qna.schemas.common import ErrorResponse, MessageResponse
from qna.services.account_service import account_service
from qna.services.auth_service import issue_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"description": "Malformed body or duplicate email", "model": ErrorResponse}},
    summary="Register an account",
)
async def register(
    credentials: AccountCredentials,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await account_service.add_account(db, credentials)
    return MessageResponse(message="Account created")


@router.post(
    "/login",
    response_model=str,
    responses={401: {"description": "Wrong credentials", "model": ErrorResponse}},
    summary="Log in and receive a session token",
)
async def login(
    credentials: AccountCredentials,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    account = await account_service.authenticate(db, credentials)
    logger.info("Account %s logged in", account.id)
    return JSONResponse(content=issue_token(account.id))
