from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as DocumentValidationError
from pymongo.database import Database
from pymongo.errors import PyMongoError

from common.logger import setup_logger
from common.middleware.body_limit import BodySizeLimitMiddleware
from common.middleware.request_trace import RequestTraceMiddleware
from common.mongo.client import create_client, resolve_database
from common.mongo.config import load_mongo_config

from .api.health import router as health_router
from .api.schemas.common import ErrorResponse
from .api.v1 import api_router
from .config import AppConfig, load_config
from .exceptions import BlogServiceError
from .services.uploads_service import UPLOADS_URL_PREFIX, UploadsService
from .session_gate import (
    RemoteSessionGate,
    SessionGateInterface,
    SessionGateMiddleware,
)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # pragma: no cover - framework hook
    """앱 생명주기 관리.

    - 시작 시: 업로드 디렉토리 생성, (주입된 DB 가 없으면) MongoDB 연결
    - 종료 시: 직접 연 MongoClient, 세션 게이트 HTTP 클라이언트 정리
    """
    app.state.uploads_service.ensure_directories()

    client = None
    if app.state.database is None:
        mongo_config = load_mongo_config()
        client = create_client(mongo_config.uri)
        app.state.database = resolve_database(client, mongo_config.db_name)

    logger.info("blog-service started")
    try:
        yield
    finally:
        if client is not None:
            client.close()
            app.state.database = None
        session_gate = app.state.session_gate
        if session_gate is not None and hasattr(session_gate, "aclose"):
            await session_gate.aclose()
        logger.info("blog-service stopped")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BlogServiceError)
    async def handle_blog_service_error(
        request: Request, exc: BlogServiceError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=exc.message).model_dump(),
        )

    @app.exception_handler(PyMongoError)
    async def handle_store_error(request: Request, exc: PyMongoError) -> JSONResponse:
        # 서비스에서 변환하지 못한 저장소 오류. 원인은 로그에만 남긴다.
        logger.error("unhandled store error: %s", exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message="Internal server error").model_dump(),
        )

    @app.exception_handler(DocumentValidationError)
    async def handle_document_error(
        request: Request, exc: DocumentValidationError
    ) -> JSONResponse:
        # 저장된 도큐먼트가 스키마와 맞지 않는 경우. 원인은 로그에만 남긴다.
        logger.error("invalid stored document: %s", exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message="Internal server error").model_dump(),
        )


def create_app(
    config: AppConfig | None = None,
    database: Database | None = None,
    session_gate: SessionGateInterface | None = None,
) -> FastAPI:
    """FastAPI 앱 팩토리.

    설정/DB/세션 게이트를 인자로 받아 테스트에서 대체 구현을 넣을 수 있게 한다.
    session_gate 가 없고 SESSION_GATE_URL 도 없으면 모든 요청을 통과시킨다.
    """
    setup_logger()
    if config is None:
        config = load_config()

    app = FastAPI(
        title="Blog Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    uploads_service = UploadsService.from_config(config.upload)
    app.state.config = config
    app.state.database = database
    app.state.uploads_service = uploads_service

    if session_gate is None and config.session_gate.url:
        session_gate = RemoteSessionGate(config.session_gate.url)
    app.state.session_gate = session_gate

    # add_middleware 는 나중에 추가한 것이 바깥쪽에서 먼저 실행된다.
    # CORS 를 가장 바깥에 두어 401/413 응답에도 CORS 헤더가 붙도록 한다.
    # 실행 순서: CORS -> BodySizeLimit -> RequestTrace -> SessionGate -> 라우터
    if session_gate is not None:
        app.add_middleware(
            SessionGateMiddleware,
            gate=session_gate,
            public_paths=config.session_gate.public_paths,
        )
    app.add_middleware(RequestTraceMiddleware)
    # 큰 바디는 RequestTraceMiddleware 가 읽기 전에 거절한다.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=config.cors.allowed_methods,
        allow_headers=config.cors.allowed_headers,
    )

    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router)

    # 업로드 파일은 인증 없이 경로로 그대로 제공한다. 디렉토리는 lifespan/업로드 시 생성된다.
    app.mount(
        UPLOADS_URL_PREFIX,
        StaticFiles(directory=uploads_service.root_dir, check_dir=False),
        name="uploads",
    )

    return app


app = create_app()


def main() -> None:
    """blog-service 메인 엔트리 포인트."""
    import uvicorn

    config = load_config()
    uvicorn.run(
        "blog_service.app.main:app",
        host="0.0.0.0",
        port=config.port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
