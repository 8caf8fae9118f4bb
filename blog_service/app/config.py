from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from common.middleware.body_limit import DEFAULT_MAX_BODY_BYTES


BLOG_SERVICE_PORT = "BLOG_SERVICE_PORT"
BASE_URL = "BASE_URL"
ALLOWED_ORIGINS = "ALLOWED_ORIGINS"
UPLOAD_DIR = "UPLOAD_DIR"
MAX_BODY_BYTES = "MAX_BODY_BYTES"
SESSION_GATE_URL = "SESSION_GATE_URL"
SESSION_GATE_PUBLIC_PATHS = "SESSION_GATE_PUBLIC_PATHS"

DEFAULT_PORT = 5000
DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_ALLOWED_ORIGINS = ("http://localhost:3000",)
DEFAULT_PUBLIC_PATHS = ("/health", "/uploads")


@dataclass(slots=True)
class CorsConfig:
    """교차 출처 요청 허용 설정."""

    allowed_origins: list[str]
    allowed_methods: list[str] = field(
        default_factory=lambda: ["GET", "POST", "PUT", "PATCH", "DELETE"]
    )
    allowed_headers: list[str] = field(
        default_factory=lambda: ["Content-Type", "Authorization"]
    )


@dataclass(slots=True)
class UploadConfig:
    """업로드 파일 저장 위치와 공개 URL 설정."""

    root_dir: Path
    base_url: str


@dataclass(slots=True)
class SessionGateConfig:
    """외부 세션 확인 엔드포인트 설정. url 이 None 이면 게이트를 사용하지 않는다."""

    url: str | None
    public_paths: list[str]


@dataclass(slots=True)
class AppConfig:
    """blog-service 전체 설정.

    create_app 에 명시적으로 넘겨서 사용하며, 앱 생성 이후에는 환경 변수를 다시 읽지 않는다.
    """

    port: int
    max_body_bytes: int
    cors: CorsConfig
    upload: UploadConfig
    session_gate: SessionGateConfig


def _split_csv(raw: str | None, default: tuple[str, ...]) -> list[str]:
    if raw is None or not raw.strip():
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_positive_int(env_name: str, default: int) -> int:
    raw = os.getenv(env_name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(
            f"{env_name} must be an integer if set, got: {raw!r}",
        ) from exc
    if value <= 0:
        raise RuntimeError(f"{env_name} must be > 0, got: {value}")
    return value


def load_cors_config() -> CorsConfig:
    origins = _split_csv(os.getenv(ALLOWED_ORIGINS), DEFAULT_ALLOWED_ORIGINS)
    return CorsConfig(allowed_origins=origins)


def load_upload_config() -> UploadConfig:
    base_url = (os.getenv(BASE_URL) or DEFAULT_BASE_URL).strip().rstrip("/")
    root_raw = os.getenv(UPLOAD_DIR) or "uploads"
    root_dir = Path(root_raw)
    if not root_dir.is_absolute():
        root_dir = Path.cwd() / root_dir
    return UploadConfig(root_dir=root_dir, base_url=base_url)


def load_session_gate_config() -> SessionGateConfig:
    url = (os.getenv(SESSION_GATE_URL) or "").strip() or None
    public_paths = _split_csv(
        os.getenv(SESSION_GATE_PUBLIC_PATHS), DEFAULT_PUBLIC_PATHS
    )
    return SessionGateConfig(url=url, public_paths=public_paths)


def load_config() -> AppConfig:
    """환경 변수에서 blog-service 설정을 로드하여 AppConfig 로 반환한다.

    MongoDB 접속 정보는 common.mongo.config 가 lifespan 시점에 따로 읽는다.
    """

    return AppConfig(
        port=_parse_positive_int(BLOG_SERVICE_PORT, DEFAULT_PORT),
        max_body_bytes=_parse_positive_int(MAX_BODY_BYTES, DEFAULT_MAX_BODY_BYTES),
        cors=load_cors_config(),
        upload=load_upload_config(),
        session_gate=load_session_gate_config(),
    )
