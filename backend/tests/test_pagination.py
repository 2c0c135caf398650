"""
QnA Backend — Pagination Parsing Tests
========================================

What we test:
    ✅ Defaults when parameters are absent
    ✅ Integer parsing of offset and limit
    ✅ Non-integer and negative values raise PaginationError naming the field
    ✅ Values past a signed 64-bit column and non-plain digit strings are rejected
    ✅ Starlette QueryParams works as input
"""

import pytest
from starlette.datastructures import QueryParams

from qna.exceptions import PaginationError, ValidationError
from qna.schemas.pagination import Pagination


class TestPaginationExtract:
    """Tests for Pagination.extract()."""

    def test_empty_params_use_defaults(self):
        assert Pagination.extract({}) == Pagination(offset=0, limit=None)

    def test_offset_and_limit_are_parsed(self):
        assert Pagination.extract({"offset": "1", "limit": "10"}) == Pagination(offset=1, limit=10)

    def test_only_limit(self):
        assert Pagination.extract({"limit": "5"}) == Pagination(offset=0, limit=5)

    def test_zero_limit_is_kept(self):
        """limit=0 is a valid, empty page, not "no limit"."""
        assert Pagination.extract({"limit": "0"}).limit == 0

    def test_unrelated_params_are_ignored(self):
        assert Pagination.extract({"sort": "desc", "offset": "3"}) == Pagination(offset=3)

    def test_query_params_input(self):
        params = QueryParams("offset=20&limit=10")
        assert Pagination.extract(params) == Pagination(offset=20, limit=10)

    def test_non_integer_offset_raises(self):
        with pytest.raises(PaginationError) as exc_info:
            Pagination.extract({"offset": "abc", "limit": "10"})
        assert exc_info.value.field == "offset"
        assert "offset" in exc_info.value.message

    def test_non_integer_limit_raises(self):
        with pytest.raises(PaginationError) as exc_info:
            Pagination.extract({"offset": "0", "limit": "1.5"})
        assert exc_info.value.field == "limit"

    def test_negative_value_raises(self):
        with pytest.raises(PaginationError) as exc_info:
            Pagination.extract({"offset": "-1"})
        assert exc_info.value.value == "-1"

    def test_largest_bigint_is_accepted(self):
        assert Pagination.extract({"limit": str(2**63 - 1)}).limit == 2**63 - 1

    def test_value_beyond_bigint_raises(self):
        with pytest.raises(PaginationError) as exc_info:
            Pagination.extract({"limit": "99999999999999999999"})
        assert exc_info.value.field == "limit"

        with pytest.raises(PaginationError):
            Pagination.extract({"offset": str(2**63)})

    @pytest.mark.parametrize("raw", ["1_0", "+3", " 7", "7 ", "", "٣", "0x10"])
    def test_only_plain_ascii_digits_are_accepted(self, raw):
        with pytest.raises(PaginationError):
            Pagination.extract({"offset": raw})

    def test_pagination_error_is_a_validation_error(self):
        """The 400 handler is registered for ValidationError and must catch it."""
        with pytest.raises(ValidationError):
            Pagination.extract({"limit": "ten"})
