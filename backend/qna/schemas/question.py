"""
QnA Backend — Question Request/Response Schemas
=================================================

What:  Pydantic models defining the API contract for the questions resource.
How:   FastAPI validates request bodies against the *Create/*Update models and
       serializes ORM rows through QuestionResponse (from_attributes).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class QuestionCreate(BaseModel):
    """Body of POST /questions. `id` and owner are never taken from the client."""
    title: str = Field(min_length=1, max_length=255, description="Question title (censored before storage)")
    content: str = Field(min_length=1, description="Question body (censored before storage)")
    tags: Optional[List[str]] = Field(default=None, description="Optional ordered list of tags")


class QuestionUpdate(QuestionCreate):
    """Body of PUT /questions/{id}. Same fields as creation; the path carries the id."""


class QuestionResponse(BaseModel):
    """A persisted question as returned by every questions endpoint."""
    id: int = Field(description="Server-assigned question id")
    title: str
    content: str
    tags: Optional[List[str]] = None
    account_id: int = Field(description="Id of the owning account")
    created_on: Optional[datetime] = None

    model_config = {"from_attributes": True}
