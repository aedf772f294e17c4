"""Tests for the shared HTTP retry loop."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from heatshield.ingest.retry import RetryPolicy, send_with_retry

REQUEST = httpx.Request("GET", "https://svc.example.com/x")


def _resp(status: int) -> httpx.Response:
    return httpx.Response(status, request=REQUEST)


class TestRetryPolicy:
    def test_exponential_delay(self):
        policy = RetryPolicy(max_retries=3, base_delay=0.5)
        assert [policy.delay(a) for a in range(3)] == [0.5, 1.0, 2.0]


class TestSendWithRetry:
    def test_first_success_no_sleep(self):
        send = MagicMock(return_value=_resp(200))
        with patch("heatshield.ingest.retry.time.sleep") as sleep:
            assert send_with_retry(send, RetryPolicy(), "svc").status_code == 200
        sleep.assert_not_called()

    def test_backoff_sequence(self):
        send = MagicMock(side_effect=[_resp(503), _resp(429), _resp(200)])
        with patch("heatshield.ingest.retry.time.sleep") as sleep:
            send_with_retry(send, RetryPolicy(max_retries=2, base_delay=1.0), "svc")
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    def test_zero_retries_raises_status(self):
        send = MagicMock(return_value=_resp(503))
        with pytest.raises(httpx.HTTPStatusError):
            send_with_retry(send, RetryPolicy(max_retries=0), "svc")
        assert send.call_count == 1

    def test_transport_error_recovers(self):
        send = MagicMock(side_effect=[httpx.ReadTimeout("slow"), _resp(200)])
        with patch("heatshield.ingest.retry.time.sleep"):
            assert send_with_retry(send, RetryPolicy(max_retries=1), "svc").status_code == 200
