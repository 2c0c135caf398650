"""
QnA Backend — Bad Words API Censoring Service
===============================================

What:  Concrete TextCensor backed by the apilayer bad_words HTTP API.
How:   POSTs the raw text to `<url>?censor_character=<c>` with an `apikey`
       header, wrapped in a tenacity retry policy for transport failures
       and transient statuses.
Who:   Instantiated once at import; shared by every request through the
       `get_censor` dependency.

Failure Classification:
    transport error (connect, timeout, protocol)
        → retried with exponential backoff + jitter, `retry_max_attempts`
          attempts in total, then ExternalAPIError
    transient status (5xx, 408 Request Timeout, 429 Too Many Requests)
        → retried the same way; the last response is then classified below
    non-2xx with an error body `{"message": ...}`
        → 4xx: CensorClientError, otherwise CensorServerError
    body matching neither the result nor the error shape
        → CensorDeserializationError (not retried)

Results are not cached; every call reaches the API.
"""

import logging
import time
import uuid
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from qna.config import settings
from qna.exceptions import (
    CensorClientError,
    CensorDeserializationError,
    CensorServerError,
    ExternalAPIError,
)
from qna.schemas.censor import APIErrorPayload, CensorResult
from qna.services.censor_base import TextCensor

logger = logging.getLogger(__name__)

# 4xx statuses that say "try again later" rather than "fix your request"
TRANSIENT_CLIENT_STATUSES = frozenset({408, 429})


def is_transient_status(status_code: int) -> bool:
    """True for responses worth another attempt: 5xx, 408 and 429."""
    return status_code >= 500 or status_code in TRANSIENT_CLIENT_STATUSES


class _TransientResponse(Exception):
    """
    Raised inside a retry attempt to hand a transient response to tenacity.

    Never leaves BadWordsService: after the last attempt the carried
    response is classified like any other error response.
    """

    def __init__(self, response: httpx.Response):
        super().__init__(f"transient status {response.status_code}")
        self.response = response


class BadWordsService(TextCensor):
    """
    apilayer bad_words implementation of TextCensor.

    Everything about a call is fixed at construction (URL, headers, retry
    bounds), so concurrent censor calls share one instance and one
    connection-pooling httpx.AsyncClient without locking.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        censor_character: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        min_wait: Optional[float] = None,
        max_wait: Optional[float] = None,
        jitter: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Arguments left as None fall back to the matching `settings` value.
        `transport` lets tests plug in an httpx.MockTransport.
        """
        self.api_key = settings.bad_words_api_key if api_key is None else api_key
        self.censor_character = censor_character or settings.censor_character
        self.api_url = api_url or settings.bad_words_api_url
        self.max_attempts = max_attempts or settings.retry_max_attempts
        self.min_wait = settings.retry_min_wait if min_wait is None else min_wait
        self.max_wait = settings.retry_max_wait if max_wait is None else max_wait
        self.jitter = settings.retry_jitter if jitter is None else jitter

        self._client = httpx.AsyncClient(
            headers={"apikey": self.api_key},
            params={"censor_character": self.censor_character},
            timeout=timeout or settings.censor_timeout,
            transport=transport,
        )

        logger.info(
            "BadWordsService initialized with url=%s, censor_character=%r, "
            "retry(attempts=%d, wait=%.1f-%.1fs)",
            self.api_url,
            self.censor_character,
            self.max_attempts,
            self.min_wait,
            self.max_wait,
        )

    def _retrying(self) -> AsyncRetrying:
        """A fresh retry controller per call; the policy itself is immutable."""
        return AsyncRetrying(
            # Network failures and transient statuses only; any other
            # response is final on the first attempt
            retry=retry_if_exception_type((httpx.TransportError, _TransientResponse)),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.min_wait,
                max=self.max_wait,
                jitter=self.jitter,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def check_profanity(self, text: str) -> CensorResult:
        """
        Send `text` to the bad_words API and return the parsed result.

        Flow:
            1. POST with retry on transport errors and transient statuses
            2. Try the success shape (2xx only)
            3. Otherwise try the error shape and classify by status
        """
        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        try:
            async for attempt in self._retrying():
                with attempt:
                    response = await self._client.post(
                        self.api_url,
                        content=text.encode("utf-8"),
                    )
                    # Raising inside the attempt is what makes tenacity retry a response
                    if is_transient_status(response.status_code):
                        logger.info(
                            "[%s] Censor API answered transient status %d",
                            call_id,
                            response.status_code,
                        )
                        raise _TransientResponse(response)
        except _TransientResponse as e:
            # Attempts exhausted: classify the last response (usually CensorServerError)
            logger.error(
                "[%s] Censor API still answering %d after %d attempts",
                call_id,
                e.response.status_code,
                self.max_attempts,
            )
            return self._interpret(e.response, call_id)
        except httpx.TransportError as e:
            logger.error(
                "[%s] Censor API unreachable after %d attempts: %s",
                call_id,
                self.max_attempts,
                str(e),
            )
            raise ExternalAPIError(
                context={
                    "call_id": call_id,
                    "attempts": self.max_attempts,
                    "error_type": type(e).__name__,
                },
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "[%s] Censor API answered %d in %.0fms",
            call_id,
            response.status_code,
            duration_ms,
        )
        return self._interpret(response, call_id)

    def _interpret(self, response: httpx.Response, call_id: str) -> CensorResult:
        """Turn a response into a CensorResult or the matching exception."""
        body = response.content

        # A 2xx that fails the result shape falls through to the error shape
        if response.is_success:
            try:
                result = CensorResult.model_validate_json(body)
            except PydanticValidationError:
                pass
            else:
                result.censor_character = self.censor_character
                logger.debug(
                    "[%s] Censor API flagged %d term(s)", call_id, result.bad_words_total
                )
                return result

        try:
            payload = APIErrorPayload.model_validate_json(body)
        except PydanticValidationError:
            logger.error(
                "[%s] Censor API body is neither a result nor an error (status %d)",
                call_id,
                response.status_code,
            )
            raise CensorDeserializationError(
                status_code=response.status_code,
                context={"call_id": call_id},
            ) from None

        if response.is_client_error:
            logger.warning(
                "[%s] Censor API client error %d: %s",
                call_id,
                response.status_code,
                payload.message,
            )
            raise CensorClientError(response.status_code, payload.message, context={"call_id": call_id})

        logger.warning(
            "[%s] Censor API server error %d: %s",
            call_id,
            response.status_code,
            payload.message,
        )
        raise CensorServerError(response.status_code, payload.message, context={"call_id": call_id})

    async def health_check(self) -> bool:
        """Configured means an API key is present; no request is sent."""
        return bool(self.api_key)

    async def aclose(self) -> None:
        """Close the pooled HTTP connections. Called from the lifespan on shutdown."""
        await self._client.aclose()


# ── Singleton Instance ────────────────────────────────────────────────────
bad_words_service = BadWordsService()
