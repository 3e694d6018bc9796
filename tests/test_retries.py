import logging

import pytest

from auto_eda.utils.retries import call_with_retries, is_transient_error_like


def test_transient_patterns():
    assert is_transient_error_like("Request timed out")
    assert is_transient_error_like("HTTP 429 Too Many Requests")
    assert is_transient_error_like("RateLimitError")
    assert not is_transient_error_like("invalid api key")
    assert not is_transient_error_like(None)


def test_retries_transient_then_succeeds(caplog):
    calls = []
    delays = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionError("connection reset by peer")
        return "done"

    with caplog.at_level(logging.WARNING):
        result = call_with_retries(flaky, max_retries=3, backoff_factor=2, initial_delay=1, sleep=delays.append)
    assert result == "done"
    assert delays == [1, 2]
    assert any("LLM_RETRY" in record.message for record in caplog.records)


def test_gives_up_after_max_retries():
    delays = []

    def always_busy():
        raise RuntimeError("503 service unavailable")

    with pytest.raises(RuntimeError):
        call_with_retries(always_busy, max_retries=2, sleep=delays.append)
    assert len(delays) == 1


def test_non_transient_is_not_retried():
    delays = []

    def broken():
        raise KeyError("choices")

    with pytest.raises(KeyError):
        call_with_retries(broken, sleep=delays.append)
    assert delays == []
