import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import ClientDisconnect
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-Id"
SPAN_ID_HEADER = "X-Span-Id"

# 요청 로그를 남기지 않는 경로 (헬스체크, 정적 업로드 파일)
IGNORED_LOG_PREFIXES: tuple[str, ...] = ("/health", "/uploads")

# JSON 본문만 로그에 싣는다. 업로드(multipart) 바이너리는 제외.
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
MAX_BODY_SNIPPET = 1024


class RequestTraceMiddleware(BaseHTTPMiddleware):
    """X-Request-Id / X-Span-Id 를 전파하고 요청마다 한 줄씩 로그를 남긴다.

    request_id 가 없으면 새로 만들고, span_id 가 없으면 "0" 을 쓴다.
    두 값은 request.state 와 응답 헤더에 그대로 실린다.
    """

    def __init__(self, app, logger: logging.Logger | None = None) -> None:  # type: ignore[override]
        super().__init__(app)
        self._logger = logger or logging.getLogger("request_trace")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        span_id = request.headers.get(SPAN_ID_HEADER) or "0"

        request.state.request_id = request_id
        request.state.span_id = span_id
        request.state.request_body = await self._read_body_snippet(request)

        should_log = not request.url.path.startswith(IGNORED_LOG_PREFIXES)
        start = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            if should_log:
                self._logger.exception(
                    "request failed",
                    extra=self._log_extra(request, start),
                )
            raise

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        response.headers.setdefault(SPAN_ID_HEADER, span_id)

        if should_log:
            self._logger.info(
                "completed request",
                extra=self._log_extra(request, start, status=response.status_code),
            )
        return response

    async def _read_body_snippet(self, request: Request) -> str | None:
        if request.method not in BODY_METHODS:
            return None
        if not request.headers.get("content-type", "").startswith("application/json"):
            return None

        try:
            body_bytes = await request.body()
        except ClientDisconnect:
            return None
        if not body_bytes:
            return None
        return body_bytes[:MAX_BODY_SNIPPET].decode("utf-8", errors="replace")

    @staticmethod
    def _log_extra(
        request: Request, start: float, status: int | None = None
    ) -> dict[str, object]:
        extra: dict[str, object] = {
            "request_id": request.state.request_id,
            "span_id": request.state.span_id,
            "method": request.method,
            "path": request.url.path,
            "duration": f"{(time.monotonic() - start) * 1000:.3f}ms",
        }
        if request.state.request_body:
            extra["body"] = request.state.request_body
        if status is not None:
            extra["status"] = status
        return extra
