"""
Serverless function adapter (API-gateway style ``event`` dicts).

Example event::

    {"httpMethod": "POST", "body": "{\\"url\\": \\"example.com\\", \\"query\\": \\"fillout\\"}"}
"""
from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Optional

from crawl_mapper.config import BatchConfig, load_config
from crawl_mapper.server.payloads import CORS_HEADERS, error_body, handle_search


def _response(status: int, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    headers = dict(CORS_HEADERS)
    if payload is None:
        return {"statusCode": status, "headers": headers, "body": ""}
    headers["Content-Type"] = "application/json"
    return {"statusCode": status, "headers": headers, "body": json.dumps(payload, ensure_ascii=False)}


def handler(event: Dict[str, Any], context: Any = None, config: Optional[BatchConfig] = None) -> Dict[str, Any]:
    """Entry point invoked by the function runtime."""
    method = (event.get("httpMethod") or "").upper()
    if method == "OPTIONS":
        return _response(200, None)
    if method != "POST":
        return _response(405, error_body("Method not allowed"))

    try:
        body = json.loads(event.get("body") or "{}")
    except ValueError:
        return _response(400, error_body("Request body must be valid JSON"))

    status, payload = asyncio.run(
        handle_search(body, config or load_config(None), source="Function")
    )
    return _response(status, payload)
