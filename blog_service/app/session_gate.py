from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

import httpx
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response

from .api.schemas.common import ErrorResponse


logger = logging.getLogger(__name__)

# 세션 확인 요청에 그대로 전달할 헤더
FORWARDED_HEADERS = ("cookie", "authorization")
DEFAULT_TIMEOUT_SECONDS = 5.0


def _build_client(
    timeout: float, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, transport=transport)


class SessionGateInterface(Protocol):
    """요청 헤더로 세션을 확인하는 외부 인증 서비스 계약.

    유효한 세션이면 세션 정보(dict)를, 아니면 None 을 반환한다.
    """

    async def get_session(
        self, headers: Mapping[str, str]
    ) -> dict[str, Any] | None:  # pragma: no cover - Protocol
        ...


class RemoteSessionGate(SessionGateInterface):
    """인증 서버의 get-session 엔드포인트에 쿠키를 넘겨 세션을 확인한다.

    게이트마다 AsyncClient 하나를 만들어 재사용하고, 앱 종료 시 aclose 로 닫는다.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = _build_client(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_session(self, headers: Mapping[str, str]) -> dict[str, Any] | None:
        forwarded = {
            name: headers[name] for name in FORWARDED_HEADERS if name in headers
        }
        if not forwarded:
            return None

        try:
            response = await self._client.get(self._url, headers=forwarded)
        except httpx.RequestError as exc:
            logger.warning("session gate request failed: %s", exc)
            return None

        if response.status_code != 200:
            return None

        try:
            payload = response.json()
        except ValueError:
            return None

        if not isinstance(payload, dict):
            return None
        return payload


class SessionGateMiddleware(BaseHTTPMiddleware):
    """공개 경로가 아닌 요청은 유효한 세션이 있을 때만 통과시킨다.

    - 공개 경로는 prefix 일치로 판단한다. (예: /uploads 는 /uploads/post/x.png 포함)
    - CORS preflight(OPTIONS)는 검사하지 않는다.
    - 세션 정보는 request.state.session 에 저장한다.
    """

    def __init__(  # type: ignore[override]
        self,
        app,
        gate: SessionGateInterface,
        public_paths: list[str],
    ) -> None:
        super().__init__(app)
        self._gate = gate
        self._public_paths = tuple(public_paths)

    def is_public(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._public_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS" or self.is_public(request.url.path):
            return await call_next(request)

        session = await self._gate.get_session(request.headers)
        if session is None:
            return JSONResponse(
                status_code=401,
                content=ErrorResponse(message="Unauthorized").model_dump(),
            )

        request.state.session = session
        return await call_next(request)
