"""
QnA Backend — Abstract Text Censor Interface
==============================================

What:  Abstract base class defining the contract for profanity censoring.
How:   Concrete implementations inherit from TextCensor and implement
       check_profanity(); censor() is derived from it.
Who:   Called by QuestionService and AnswerService before persisting text.
When:  After authorization, before any SQL statement of the request.

Implementations:
    - BadWordsService: apilayer bad_words HTTP API with retry policy
    - test doubles in tests/conftest.py
"""

from abc import ABC, abstractmethod

from qna.schemas.censor import CensorResult


class TextCensor(ABC):
    """
    Abstract interface for turning user text into censored text.

    Contract:
        - No local length validation; limits are the provider's business
        - Implementations handle their own retry logic and error translation
        - All provider failures surface as ExternalAPIError (or a subclass)
        - Implementations hold no per-call mutable state, so one instance is
          shared by all concurrent requests
    """

    @abstractmethod
    async def check_profanity(self, text: str) -> CensorResult:
        """
        Ask the provider which terms in `text` are profane.

        Returns:
            CensorResult with the censored text and the flagged spans.

        Raises:
            ExternalAPIError: transport kept failing after all retries
            CensorClientError: provider rejected the request (4xx)
            CensorServerError: provider failed (5xx)
            CensorDeserializationError: response body was unreadable
        """
        ...

    async def censor(self, text: str) -> str:
        """Return `text` with every flagged term replaced by censor characters."""
        result = await self.check_profanity(text)
        return result.censored_content

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight readiness check; must not consume provider quota."""
        ...
