import logging
import time
from typing import Any, Dict, Optional

from fastapi import Request, Response

log = logging.getLogger("storefront.admin")

SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "apikey",
}

# /loyalty/<segment> paths that are lookups, not customer ids
NON_CUSTOMER_SEGMENTS = {"tiers", "convert"}


def _masked_header_names(headers: Dict[str, str]) -> Dict[str, str]:
    return {k: "***masked***" for k in headers if k.lower() in SENSITIVE_HEADERS}


def customer_from_path(path: str) -> Optional[str]:
    parts = [p for p in path.split("/") if p]
    if len(parts) < 2 or parts[0] != "loyalty":
        return None
    if parts[1] in NON_CUSTOMER_SEGMENTS:
        return None
    return parts[1]


def log_request_response(request: Request, response: Response, start_time: float) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "customer_id": customer_from_path(request.url.path),
        "status_code": response.status_code,
        "duration_ms": int((time.time() - start_time) * 1000),
        "authenticated": "authorization" in {k.lower() for k in request.headers},
        "masked_headers": _masked_header_names(dict(request.headers)),
    }

    if response.status_code >= 500:
        log.warning(entry)
    else:
        log.info(entry)
    return entry
