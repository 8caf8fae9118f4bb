"""공통 스키마 정의."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """모든 에러 응답의 공통 형태."""

    success: bool = False
    message: str
