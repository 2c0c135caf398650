"""
QnA Backend — Answer Request/Response Schemas
===============================================
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AnswerCreate(BaseModel):
    """Body of POST /questions/{id}/answers; the question id comes from the path."""
    content: str = Field(min_length=1, description="Answer body (censored before storage)")


class AnswerResponse(BaseModel):
    id: int
    content: str
    question_id: int
    account_id: int
    created_on: Optional[datetime] = None

    model_config = {"from_attributes": True}
