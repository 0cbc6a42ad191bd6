# middleware/request_id.py
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
import time
import uuid

from pta.core.logging import logger


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Stamp each request with an id (reusing the caller's ``X-Request-ID``) and log its outcome"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ):
        request.state.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({(time.perf_counter() - start) * 1000:.1f} ms)",
            extra={"request_id": request.state.request_id},
        )
        return response
