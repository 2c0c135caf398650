"""
QnA Backend — Account & Session Schemas
=========================================

What:  Request bodies for /register and /login, and the Session decoded from
       a verified token.

Session validity:
    A session is valid for nbf <= now < exp. Verification in
    qna.services.auth_service enforces the window; the model only carries it.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, PositiveInt

# Same shape the accounts table CHECK constraint enforces on PostgreSQL
EMAIL_PATTERN = r"^\w+@[a-zA-Z_]+?\.[a-zA-Z]{2,3}$"


class AccountCredentials(BaseModel):
    """Body of POST /register and POST /login. The password is plaintext here only."""
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255, description="Account email")
    password: str = Field(min_length=1, max_length=1024, description="Plaintext password")


class Session(BaseModel):
    """An authenticated account identity with an explicit validity window."""
    account_id: PositiveInt
    nbf: datetime = Field(description="Not valid before this instant (UTC)")
    exp: datetime = Field(description="Not valid at or after this instant (UTC)")

    def is_valid_at(self, now: Optional[datetime] = None) -> bool:
        """True when `now` lies within [nbf, exp)."""
        now = now or datetime.now(timezone.utc)
        return self.nbf <= now < self.exp
