# novel_scout/crawler/fetcher.py
"""
Fetcher module: shared aiohttp client with rate limiting, retry/backoff and timeout.

One :class:`HttpClient` is used by every worker at once; aiohttp's
``ClientSession`` multiplexes concurrent requests over its connection pool.
"""
from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from novel_scout.errors import FetchError
from novel_scout.logger import logger

__all__ = ("Response", "HttpClient", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


@dataclass(frozen=True, slots=True)
class Response:
    """Status, headers and raw body of one GET request."""

    url: str
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    charset: Optional[str] = None

    @property
    def content_type(self) -> str:
        """Lower-cased mimetype without parameters, e.g. ``image/png``."""
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value.split(";", 1)[0].strip().lower()
        return ""

    def text(self) -> str:
        return self.body.decode(self.charset or "utf-8", errors="replace")


class HttpClient:
    """Асинхронный HTTP-клиент с retry и ограничением частоты запросов."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str = "NovelScout/0.1",
        retry_times: int = 2,
        rate_limit: Optional[float] = None,
        max_connections: int = 8,
        backoff_factor: float = 1.0,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.retry_times = retry_times
        self.rate_limit = rate_limit
        self.max_connections = max_connections
        self.backoff_factor = backoff_factor
        self.session = session
        self._owns_session = session is None
        self._rate_lock = asyncio.Lock()
        self._last_request_ts = 0.0

    @classmethod
    def from_config(cls, config) -> HttpClient:
        return cls(
            timeout=config.timeout,
            user_agent=config.user_agent,
            retry_times=config.retry_times,
            rate_limit=config.rate_limit,
            max_connections=config.concurrency,
        )

    async def __aenter__(self) -> HttpClient:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
                connector=TCPConnector(limit_per_host=self.max_connections),
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def get(self, url: str) -> Response:
        """
        GET *url*, retrying 5xx/429 responses and connection errors.

        Returns the Response for any 2xx status; raises FetchError otherwise.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        attempts = 0
        while True:
            await self._wait_for_rate_limit()
            # status of the last retryable response; None for network errors
            retry_status: Optional[int] = None
            try:
                async with self.session.get(url) as resp:
                    if resp.status in RETRY_STATUS:
                        retry_status = resp.status
                        raise ClientError(f"retryable status {resp.status}")
                    body = await resp.read()
                    headers: Dict[str, str] = {k: v for k, v in resp.headers.items()}
                    response = Response(url, resp.status, headers, body, resp.charset)
            except (ClientError, asyncio.TimeoutError) as e:
                attempts += 1
                if attempts > self.retry_times:
                    if retry_status is not None:
                        reason = f"HTTP {retry_status}"
                    else:
                        reason = str(e) or type(e).__name__
                    logger.warning("Failed %s: %s", url, reason)
                    raise FetchError(url, reason, status=retry_status) from e
                backoff = min(60, self.backoff_factor * (2**attempts + random.random()))
                logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.retry_times, url, backoff)
                await asyncio.sleep(backoff)
                continue

            if not 200 <= response.status < 300:
                raise FetchError(url, f"HTTP {response.status}", status=response.status)
            return response

    async def _wait_for_rate_limit(self) -> None:
        if not self.rate_limit:
            return
        interval = 1 / self.rate_limit
        async with self._rate_lock:
            now = time.monotonic()
            wait = interval - (now - self._last_request_ts)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_request_ts = time.monotonic()
