# menu_scout/fetcher.py
"""
Fetcher module: handles HTTP requests with per-attempt timeout, retry and linear backoff.
"""
from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Mapping, Optional

from aiohttp import ClientError, ClientSession

from menu_scout.logger import logger

__all__ = ("DEFAULT_HEADERS", "Fetcher", "FetchError", "FetchErrorKind", "RetryPolicy")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; MenuScout/1.0; +https://example.com/bot)"
DEFAULT_HEADERS: Mapping[str, str] = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9",
}

SleepFunc = Callable[[float], Awaitable[None]]


class FetchErrorKind(str, enum.Enum):
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    CONTENT_TYPE = "content_type"


class FetchError(Exception):
    """Страница не получена: причина последней неудачной попытки."""

    def __init__(
        self,
        url: str,
        kind: FetchErrorKind,
        message: str,
        *,
        attempts: int = 1,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.kind = kind
        self.attempts = attempts
        self.status = status


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Timeout/retry settings for a single fetch, in seconds.

    ``max_retries`` is the total number of attempts; attempt *k* (k > 1)
    waits ``retry_delay * (k - 1)`` before it starts.
    """

    timeout: float = 10.0
    max_retries: int = 3
    retry_delay: float = 1.0

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")

    def delay_before(self, attempt: int) -> float:
        return self.retry_delay * (attempt - 1)


class Fetcher:
    """Loads HTML front pages with a hard timeout per attempt and bounded retries."""

    def __init__(
        self,
        session: ClientSession,
        policy: RetryPolicy,
        headers: Optional[Mapping[str, str]] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.session = session
        self.policy = policy
        self.headers: Dict[str, str] = {**DEFAULT_HEADERS, **(headers or {})}
        self._sleep = sleep

    async def fetch(self, url: str) -> str:
        """
        Fetch *url* and return the response body as text.

        Raises FetchError carrying the last attempt's cause when every attempt fails.
        """
        max_retries = self.policy.max_retries
        last_error: Optional[FetchError] = None

        for attempt in range(1, max_retries + 1):
            if attempt > 1:
                backoff = self.policy.delay_before(attempt)
                logger.debug("Retry %d/%d for %s after %.2f s", attempt, max_retries, url, backoff)
                await self._sleep(backoff)
            try:
                return await asyncio.wait_for(self._attempt(url, attempt), timeout=self.policy.timeout)
            except asyncio.TimeoutError:
                last_error = FetchError(
                    url,
                    FetchErrorKind.TIMEOUT,
                    f"Timed out after {self.policy.timeout:g} s",
                    attempts=attempt,
                )
                logger.info("Attempt %d/%d for %s timed out after %g s", attempt, max_retries, url, self.policy.timeout)
            except FetchError as exc:
                last_error = exc
                logger.warning("Attempt %d/%d for %s failed: %s", attempt, max_retries, url, exc)
            except ClientError as exc:
                last_error = FetchError(
                    url,
                    FetchErrorKind.TRANSPORT,
                    f"Request failed: {str(exc) or type(exc).__name__}",
                    attempts=attempt,
                )
                logger.warning("Attempt %d/%d for %s failed: %s", attempt, max_retries, url, exc)

        raise last_error  # type: ignore[misc]

    async def _attempt(self, url: str, attempt: int) -> str:
        async with self.session.get(url, headers=self.headers, raise_for_status=False) as resp:
            if not 200 <= resp.status < 300:
                raise FetchError(
                    url,
                    FetchErrorKind.HTTP_STATUS,
                    f"HTTP error! status: {resp.status}",
                    attempts=attempt,
                    status=resp.status,
                )
            ctype = resp.headers.get("Content-Type", "").lower()
            if "text/html" not in ctype:
                raise FetchError(
                    url,
                    FetchErrorKind.CONTENT_TYPE,
                    f"Response is not HTML (Content-Type: {ctype or 'missing'})",
                    attempts=attempt,
                )
            return await resp.text(errors="replace")
