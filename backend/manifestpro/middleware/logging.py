"""Access log middleware: one JSON line per request, tagged with a request ID."""

import json
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("manifestpro.access")

REQUEST_ID_HEADER = "X-Request-ID"


def _access_record(request: Request, request_id: str, status: int, started: float) -> str:
    return json.dumps({
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S%z"),
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "status": status,
        "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        "upload_bytes": int(request.headers.get("content-length") or 0),
        "client": request.client.host if request.client else None,
    })


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        # Keep the caller's ID so a frontend can correlate its own logs.
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        started = time.perf_counter()
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(_access_record(request, request_id, 500, started))
            raise

        record = _access_record(request, request_id, response.status_code, started)
        if response.status_code >= 500:
            logger.warning(record)
        else:
            logger.info(record)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
