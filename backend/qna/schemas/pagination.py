"""
QnA Backend — Pagination Parameters
=====================================

What:  Derives a validated offset/limit window from untyped query parameters.
How:   `Pagination.extract()` reads `offset` and `limit` from any string
       mapping (Starlette's QueryParams works as-is) and raises
       PaginationError on anything that is not a non-negative integer
       written in plain ASCII digits and fitting a signed 64-bit column.

Defaults:
    offset = 0
    limit  = None, meaning "no limit" (the query gets no LIMIT clause)

An offset past the end of the table is not an error; the page is empty.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from qna.exceptions import PaginationError


# Largest value a BIGINT OFFSET/LIMIT bind parameter accepts
MAX_PAGINATION_VALUE = 2**63 - 1


def _parse_non_negative(params: Mapping[str, str], field: str) -> Optional[int]:
    raw = params.get(field)
    if raw is None:
        return None
    # Plain ASCII digits only: int() would also take "+3", "1_0", " 7 " and
    # non-ASCII digits, and a leading "-" is rejected here as well
    if not (raw.isascii() and raw.isdigit()):
        raise PaginationError(field=field, value=raw)
    value = int(raw)
    # Out-of-range values would otherwise fail inside the database driver
    if value > MAX_PAGINATION_VALUE:
        raise PaginationError(field=field, value=raw)
    return value


@dataclass(frozen=True)
class Pagination:
    """An offset/limit window over an ordered result set."""
    offset: int = 0
    limit: Optional[int] = None

    @classmethod
    def extract(cls, params: Mapping[str, str]) -> "Pagination":
        """
        Build a Pagination from query parameters.

        Args:
            params: String-keyed, string-valued mapping, e.g. request.query_params

        Returns:
            Pagination with defaults filled in for absent keys.

        Raises:
            PaginationError: `offset` or `limit` is present but not a
                non-negative integer. No partial result is ever returned.
        """
        offset = _parse_non_negative(params, "offset")
        limit = _parse_non_negative(params, "limit")
        return cls(offset=offset or 0, limit=limit)
