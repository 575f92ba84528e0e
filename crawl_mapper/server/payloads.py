"""Request validation and error-to-status mapping shared by the HTTP adapters."""
from __future__ import annotations

from typing import Any, Dict, Tuple

from crawl_mapper import engine
from crawl_mapper.aggregator import CrawlReport
from crawl_mapper.config import BatchConfig
from crawl_mapper.exceptions import SitemapUnavailable
from crawl_mapper.logger import logger

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

Response = Tuple[int, Dict[str, Any]]


def error_body(message: str) -> Dict[str, Any]:
    return {"error": message, "success": False}


def report_payload(report: CrawlReport) -> Dict[str, Any]:
    """camelCase view of *report* served to browser clients."""
    return {
        "sitemapUrl": report.sitemap_url,
        "query": report.query,
        "totalPages": report.total_pages,
        "foundPages": report.found_pages,
        "matchingUrls": list(report.matching_urls),
        "allResults": [{"url": r.url, "found": r.found} for r in report.results],
        "totalURLsFound": report.total_urls_found,
        "urlsProcessed": report.urls_processed,
        "batchesProcessed": report.batches_processed,
        "elapsedTime": round(report.elapsed_time, 3),
        "timedOut": report.timed_out,
        "truncated": report.truncated,
    }


async def handle_search(body: Any, config: BatchConfig, source: str = "API") -> Response:
    """Run a search for a decoded JSON *body* and return ``(status, payload)``.

    Missing ``url``/``query`` is a 400, an unavailable sitemap a 404 and any
    other crawl failure a 500.
    """
    if not isinstance(body, dict):
        return 400, error_body("Request body must be a JSON object")
    url, query = body.get("url"), body.get("query")
    if not isinstance(url, str) or not isinstance(query, str) or not url.strip() or not query.strip():
        return 400, error_body("Both url and query parameters are required")

    logger.info('[%s] Searching for "%s" in %s', source, query, url)
    try:
        report = await engine.crawl_and_search(url, query, config)
    except SitemapUnavailable as exc:
        logger.warning("[%s] %s", source, exc)
        return 404, error_body(str(exc))
    except Exception as exc:
        logger.exception("[%s] Error: %s", source, exc)
        return 500, error_body(str(exc))
    return 200, {"success": True, "data": report_payload(report)}
