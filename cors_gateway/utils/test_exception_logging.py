import logging
from unittest.mock import Mock

import httpx

from cors_gateway.utils import mask_token, redact_headers
from cors_gateway.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)


class BrokenStrException(Exception):
    """An exception that breaks when __str__ is called."""

    def __str__(self):
        raise RuntimeError("Cannot convert to string!")

    def __repr__(self):
        return "BrokenStrException(cannot convert to string)"


class TestFormatExceptionMessage:
    def test_plain_message(self):
        assert format_exception_message(httpx.ConnectError("refused")) == "refused"

    def test_empty_message_falls_back_to_type(self):
        assert format_exception_message(httpx.ConnectTimeout("")) == "ConnectTimeout"

    def test_broken_str_uses_repr(self):
        assert format_exception_message(BrokenStrException()) == (
            "BrokenStrException(cannot convert to string)"
        )

    def test_exception_group(self):
        group = ExceptionGroup(
            "connect failed",
            [httpx.ConnectError("ipv6 refused"), OSError("ipv4 unreachable")],
        )

        result = format_exception_message(group)

        assert result.startswith("connect failed")
        assert "ConnectError: ipv6 refused" in result
        assert "OSError: ipv4 unreachable" in result

    def test_none(self):
        assert format_exception_message(None) == "None"


class TestLogExceptionWithDetails:
    def test_regular_exception(self):
        logger = Mock(spec=logging.Logger)
        error = httpx.ConnectError("refused")

        log_exception_with_details(logger, "[Proxy]", error)

        logger.log.assert_called_once()
        level, message = logger.log.call_args[0]
        assert level == logging.ERROR
        assert message == "[Proxy] ConnectError: refused"
        assert logger.log.call_args[1]["exc_info"] is error

    def test_exception_group_logs_each_sub_exception(self):
        logger = Mock(spec=logging.Logger)
        group = ExceptionGroup("two failures", [ValueError("a"), KeyError("b")])

        log_exception_with_details(logger, "[Proxy]", group, level=logging.WARNING)

        assert logger.log.call_count == 3
        messages = [c[0][1] for c in logger.log.call_args_list]
        assert "sub-exceptions" in messages[0]
        assert messages[1] == "[Proxy] Sub-exception 1: ValueError: a"

    def test_logger_failure_is_contained(self):
        logger = Mock(spec=logging.Logger)
        logger.log.side_effect = [RuntimeError("handler broke"), None]

        log_exception_with_details(logger, "[Proxy]", ValueError("x"))

        assert logger.log.call_args[0] == (logging.ERROR, "[Proxy] Exception (logging failed)")


def test_redact_headers():
    headers = {
        "Authorization": "Bearer secret-token",
        "cookie": "session=abcdef",
        "accept": "application/json",
    }

    result = redact_headers(headers)

    assert result["Authorization"] == "Bear****"
    assert result["cookie"] == "sess****"
    assert result["accept"] == "application/json"
    assert headers["Authorization"] == "Bearer secret-token"


def test_mask_token_without_token():
    assert mask_token("nothing to hide", "") == "nothing to hide"
