from __future__ import annotations

from pydantic import BaseModel


class UploadResponse(BaseModel):
    """업로드 결과 DTO. url 은 BASE_URL 기준의 공개 주소다."""

    success: bool = True
    message: str
    url: str
