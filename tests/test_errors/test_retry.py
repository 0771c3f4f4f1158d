"""Tests for transport error classification."""

import httpx
import pytest

from mjmlcache.errors.exceptions import AuthenticationError, TransportError
from mjmlcache.errors.retry import (
    UNREACHABLE_STATUS,
    classify_http_error,
    classify_status,
    is_transient,
)

_REQUEST = httpx.Request("POST", "https://api.mjml.io/v1/render")


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    response = httpx.Response(status_code=status_code, request=_REQUEST)
    return httpx.HTTPStatusError("bad status", request=_REQUEST, response=response)


class TestClassifyHttpError:
    def test_timeout(self):
        err = classify_http_error(httpx.ReadTimeout("timed out", request=_REQUEST))
        assert isinstance(err, TransportError)
        assert err.error_type == "timeout"
        assert err.http_status == UNREACHABLE_STATUS
        assert err.transient

    def test_connection_error(self):
        err = classify_http_error(httpx.ConnectError("refused", request=_REQUEST))
        assert err.error_type == "connection"
        assert err.http_status == UNREACHABLE_STATUS

    def test_other_http_error(self):
        err = classify_http_error(httpx.DecodingError("bad gzip", request=_REQUEST))
        assert err.error_type == "unknown"
        assert err.http_status == UNREACHABLE_STATUS

    def test_unknown_exception(self):
        original = ValueError("odd")
        err = classify_http_error(original)
        assert err.error_type == "unknown"
        assert err.original is original


class TestClassifyStatus:
    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failures(self, status):
        err = classify_status(status, "denied")
        assert isinstance(err, AuthenticationError)
        assert err.http_status == status

    def test_validation(self):
        err = classify_status(400, "mj-text is invalid")
        assert err.error_type == "validation"
        assert not err.transient

    def test_server_error(self):
        err = classify_status(503)
        assert err.error_type == "server_error"


class TestIsTransient:
    def test_timeout_is_transient(self):
        assert is_transient(httpx.ConnectTimeout("slow", request=_REQUEST))

    def test_network_error_is_transient(self):
        assert is_transient(httpx.ConnectError("refused", request=_REQUEST))

    def test_status_error_not_transient(self):
        assert not is_transient(_status_error(500))

    def test_other_errors_not_transient(self):
        assert not is_transient(ValueError("x"))
