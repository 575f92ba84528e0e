"""crawl_mapper.utils: URL helpers for turning site references into fetchable addresses."""

from __future__ import annotations

import re
from typing import Sequence
from urllib.parse import urlparse

from crawl_mapper.logger import logger

__all__: Sequence[str] = (
    "normalize_sitemap_url",
    "sitemap_url_for",
    "base_site_url",
    "resolve_url",
)

_TRAILING_SLASHES = re.compile(r"/+$")
_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_WWW = re.compile(r"^www\.", re.IGNORECASE)


def normalize_sitemap_url(site: str) -> str:
    """Turn a site reference into ``https://www.<host>/sitemap.xml``.

    ``example.com``, ``http://www.example.com/`` and ``https://example.com///``
    all map to ``https://www.example.com/sitemap.xml``. The ``www.`` prefix is
    always forced, so sites without that subdomain fail later at fetch time.
    """
    clean = site.strip()
    clean = _TRAILING_SLASHES.sub("", clean)
    clean = _SCHEME.sub("", clean)
    clean = _WWW.sub("", clean)
    normalized = f"https://www.{clean}/sitemap.xml"
    logger.debug("Normalized sitemap URL: %s -> %s", site, normalized)
    return normalized


def sitemap_url_for(site_or_sitemap_url: str) -> str:
    """Use an explicit ``*.xml`` address as given, normalize anything else."""
    clean = site_or_sitemap_url.strip()
    if urlparse(clean if "://" in clean else f"https://{clean}").path.lower().endswith(".xml"):
        return clean if _SCHEME.match(clean) else f"https://{clean.lstrip('/')}"
    return normalize_sitemap_url(clean)


def base_site_url(sitemap_url: str) -> str:
    """Return ``https://<host>`` of a sitemap address."""
    return f"https://{urlparse(sitemap_url).netloc}"


def _host_of(base_url: str) -> str:
    if "://" in base_url:
        return urlparse(base_url).netloc
    return base_url.strip("/").split("/", 1)[0]


def resolve_url(url: str, base_url: str) -> str:
    """Make a sitemap-declared URL absolute against *base_url*.

    Absolute URLs pass through; ``//host/x`` becomes ``https://host/x``;
    ``/x`` and ``x`` are placed under ``https://<host of base_url>``.
    """
    if _SCHEME.match(url):
        return url
    if url.startswith("//"):
        return f"https:{url}"
    host = _host_of(base_url)
    if url.startswith("/"):
        return f"https://{host}{url}"
    return f"https://{host}/{url}"
