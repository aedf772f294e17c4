"""Shared retry loop for the outbound HTTP clients."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

RETRY_STATUSES = frozenset({429, 503})


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 2
    base_delay: float = 2.0

    def delay(self, attempt: int) -> float:
        return self.base_delay * 2**attempt


def send_with_retry(
    send: Callable[[], httpx.Response], policy: RetryPolicy, label: str
) -> httpx.Response:
    """Call ``send`` until it yields a usable response.

    429/503 responses and transport errors are retried with exponential
    backoff. Once retries run out the transport error propagates, and a
    final error status surfaces through ``raise_for_status``.
    """
    attempt = 0
    while True:
        retries_left = attempt < policy.max_retries
        try:
            resp = send()
        except httpx.RequestError as e:
            if not retries_left:
                raise
            wait = policy.delay(attempt)
            logger.warning("%s: %s, retrying in %.1fs", label, e, wait)
        else:
            if resp.status_code not in RETRY_STATUSES or not retries_left:
                resp.raise_for_status()
                return resp
            wait = policy.delay(attempt)
            logger.warning(
                "%s: HTTP %d, retrying in %.1fs (attempt %d/%d)",
                label, resp.status_code, wait, attempt + 1, policy.max_retries,
            )
        time.sleep(wait)
        attempt += 1
