"""
Fetcher module: one bounded GET per page, with timeout and body size ceiling.
"""
from __future__ import annotations

import asyncio
import codecs
import logging
from typing import Optional, Protocol

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout

_CHUNK_SIZE = 64 * 1024


class ContentSource(Protocol):
    """Anything that can return a page body, or None, without raising."""

    async def fetch(self, url: str, timeout: float, max_bytes: int) -> Optional[str]: ...


class PageTooLarge(Exception):
    """Body exceeded the configured ceiling."""


async def read_limited(resp: ClientResponse, max_bytes: int) -> bytes:
    """Read the response body, raising PageTooLarge past *max_bytes*."""
    if resp.content_length is not None and resp.content_length > max_bytes:
        raise PageTooLarge()
    body = bytearray()
    async for chunk in resp.content.iter_chunked(_CHUNK_SIZE):
        body.extend(chunk)
        if len(body) > max_bytes:
            raise PageTooLarge()
    return bytes(body)


class ContentFetcher:
    """Fetches page bodies through a shared aiohttp session.

    Every failure (timeout, connection error, non-2xx status, oversize body)
    is logged and reported as None. No retries are made.
    """

    def __init__(self, session: ClientSession) -> None:
        self.session = session
        self.logger = logging.getLogger("CrawlMapper")

    async def fetch(self, url: str, timeout: float, max_bytes: int) -> Optional[str]:
        """Return the decoded body of *url*, or None on any failure."""
        try:
            async with self.session.get(
                url, timeout=ClientTimeout(total=timeout), raise_for_status=False
            ) as resp:
                if not 200 <= resp.status < 300:
                    self.logger.warning("Could not fetch %s: HTTP %s", url, resp.status)
                    return None
                body = await read_limited(resp, max_bytes)
                return body.decode(self._encoding(resp), errors="replace")
        except asyncio.TimeoutError:
            self.logger.warning("Could not fetch %s: timed out after %.1f s", url, timeout)
        except PageTooLarge:
            self.logger.warning("Could not fetch %s: body larger than %d bytes", url, max_bytes)
        except (ClientError, ValueError) as exc:
            self.logger.warning("Could not fetch %s: %s", url, exc)
        return None

    @staticmethod
    def _encoding(resp: ClientResponse) -> str:
        charset = resp.charset or "utf-8"
        try:
            codecs.lookup(charset)
        except LookupError:
            return "utf-8"
        return charset
