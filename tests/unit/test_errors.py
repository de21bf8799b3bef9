"""Unit tests for transport error classification."""
from __future__ import annotations

from casper_query.errors import (
    NotFoundError,
    StatusCode,
    TransportError,
    classify_error,
    is_account_not_created,
    to_status_code,
)


class TestClassifyError:
    def test_not_found(self) -> None:
        err = classify_error(StatusCode.NOT_FOUND, "no such block")
        assert isinstance(err, NotFoundError)
        assert err.code == StatusCode.NOT_FOUND
        assert err.message == "no such block"

    def test_other_codes_are_generic(self) -> None:
        err = classify_error(StatusCode.UNAVAILABLE, "connection refused")
        assert type(err) is TransportError
        assert err.code == StatusCode.UNAVAILABLE
        assert err.message == "connection refused"

    def test_invalid_argument_is_not_not_found(self) -> None:
        err = classify_error(StatusCode.INVALID_ARGUMENT, "Key not found")
        assert not isinstance(err, NotFoundError)

    def test_raw_int_code(self) -> None:
        assert isinstance(classify_error(5, "x"), NotFoundError)

    def test_unknown_code_maps_to_unknown(self) -> None:
        assert to_status_code(99) == StatusCode.UNKNOWN
        assert classify_error(99, "x").code == StatusCode.UNKNOWN

    def test_str_contains_code_and_message(self) -> None:
        assert str(classify_error(StatusCode.INTERNAL, "boom")) == "INTERNAL: boom"


class TestIsAccountNotCreated:
    def test_invalid_argument_with_key(self) -> None:
        err = TransportError(StatusCode.INVALID_ARGUMENT, "Key Account(...) not found")
        assert is_account_not_created(err)

    def test_substring_is_case_sensitive(self) -> None:
        err = TransportError(StatusCode.INVALID_ARGUMENT, "key not found")
        assert not is_account_not_created(err)

    def test_not_found_code_is_not_account_missing(self) -> None:
        err = NotFoundError(StatusCode.NOT_FOUND, "Key not found")
        assert not is_account_not_created(err)

    def test_invalid_argument_without_key(self) -> None:
        err = TransportError(StatusCode.INVALID_ARGUMENT, "bad hash")
        assert not is_account_not_created(err)
