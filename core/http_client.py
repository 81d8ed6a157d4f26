"""Async HTTP client with retry logic."""
import asyncio
import json
import logging
from typing import Optional, Any, Dict
from urllib.parse import urlparse

import aiohttp

from core.errors import QuotaExceededError, UpstreamAuthError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


class HttpClient:
    """Async HTTP client with retry logic and rate limiting."""

    def __init__(self, timeout: int = 25, concurrency: int = 12, retries: int = 2,
                 backoff: float = 0.5):
        self.timeout = timeout
        self.retries = retries
        self.backoff = backoff
        self.semaphore = asyncio.Semaphore(concurrency)
        self.session: Optional[aiohttp.ClientSession] = None
        self.default_headers = {
            "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
            "Accept": "application/json",
        }

    async def __aenter__(self):
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        self.session = aiohttp.ClientSession(timeout=timeout, headers=self.default_headers)
        return self

    async def __aexit__(self, *exc):
        if self.session:
            await self.session.close()

    @staticmethod
    async def _decode(resp: aiohttp.ClientResponse) -> Optional[Any]:
        try:
            return await resp.json(content_type=None)
        except (aiohttp.ContentTypeError, json.JSONDecodeError, ValueError):
            text = await resp.text()
            try:
                return json.loads(text)
            except ValueError:
                return None

    async def _request_with_retry(self, method: str, url: str, **kwargs) -> Optional[Any]:
        """
        Execute HTTP request with retry logic.

        Transient failures (network errors, timeouts, 5xx) are retried with a
        fixed backoff; auth and quota responses are raised immediately.
        """
        source = urlparse(url).netloc or url
        headers = dict(self.default_headers)
        if kwargs.get("headers"):
            headers.update(kwargs["headers"])
        kwargs["headers"] = headers

        last_error = "no attempt made"
        for attempt in range(self.retries + 1):
            try:
                async with self.semaphore:
                    async with self.session.request(method, url, **kwargs) as resp:
                        if resp.status == 200:
                            return await self._decode(resp)
                        if resp.status in (204, 304, 404):
                            return None
                        body = (await resp.text())[:200]
                        if resp.status in (401, 403):
                            raise UpstreamAuthError(source, f"HTTP {resp.status}: {body}")
                        if resp.status in (402, 429):
                            raise QuotaExceededError(source, f"HTTP {resp.status}: {body}")
                        last_error = f"HTTP {resp.status}: {body}"
                        if resp.status < 500:
                            raise UpstreamUnavailableError(source, last_error)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = f"{type(e).__name__}: {e}"

            logger.debug(f"Request to {source} failed (attempt {attempt + 1}): {last_error}")
            if attempt < self.retries:
                await asyncio.sleep(self.backoff * (attempt + 1))

        raise UpstreamUnavailableError(source, last_error)

    async def get(self, url: str, params: Optional[Dict] = None, headers: Optional[Dict] = None) -> Optional[Any]:
        return await self._request_with_retry("GET", url, params=params, headers=headers)

    async def post_json(self, url: str, json_body: Any, headers: Optional[Dict] = None,
                        params: Optional[Dict] = None) -> Optional[Any]:
        return await self._request_with_retry("POST", url, json=json_body, headers=headers, params=params)
