from __future__ import annotations

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response


DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Content-Length 가 상한을 넘는 요청을 핸들러 도달 전에 413 으로 거절한다."""

    def __init__(  # type: ignore[override]
        self,
        app,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(app)
        self._max_body_bytes = max_body_bytes
        self._logger = logger or logging.getLogger("body_limit")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        raw_length = request.headers.get("content-length")
        if raw_length:
            try:
                length = int(raw_length)
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"success": False, "message": "Invalid Content-Length"},
                )
            if length > self._max_body_bytes:
                self._logger.warning(
                    "request body too large",
                    extra={"method": request.method, "path": request.url.path},
                )
                return JSONResponse(
                    status_code=413,
                    content={"success": False, "message": "Request body too large"},
                )

        return await call_next(request)
