from __future__ import annotations

import logging
import random
import shutil
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from fastapi import Request, UploadFile

from ..config import UploadConfig
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads"


class UploadCategory(str, Enum):
    USER = "user"
    POST = "post"


@dataclass(slots=True)
class StoredUpload:
    category: UploadCategory
    filename: str
    path: Path
    url: str


def generate_filename(original_name: str | None) -> str:
    """<epoch-millis>-<0~1e9 난수><원본 확장자> 형태의 파일명을 만든다."""

    millis = int(time.time() * 1000)
    suffix = random.randint(0, 1_000_000_000)
    extension = Path(original_name or "").suffix
    return f"{millis}-{suffix}{extension}"


class UploadsService:
    """이미지 업로드를 카테고리별 디렉토리에 저장하고 공개 URL 을 만들어 준다.

    파일 형식/내용은 검사하지 않는다. 크기 상한은 BodySizeLimitMiddleware 가 담당한다.
    """

    def __init__(self, root_dir: Path, base_url: str) -> None:
        self._root_dir = root_dir
        self._base_url = base_url.rstrip("/")

    @classmethod
    def from_config(cls, config: UploadConfig) -> "UploadsService":
        return cls(root_dir=config.root_dir, base_url=config.base_url)

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def category_dir(self, category: UploadCategory) -> Path:
        return self._root_dir / category.value

    def ensure_directories(self) -> None:
        for category in UploadCategory:
            self.category_dir(category).mkdir(parents=True, exist_ok=True)

    def build_url(self, category: UploadCategory, filename: str) -> str:
        return f"{self._base_url}{UPLOADS_URL_PREFIX}/{category.value}/{filename}"

    def save(self, category: UploadCategory, file: UploadFile | None) -> StoredUpload:
        if file is None:
            raise ValidationError("No image file uploaded")

        directory = self.category_dir(category)
        directory.mkdir(parents=True, exist_ok=True)

        filename = generate_filename(file.filename)
        path = directory / filename
        with path.open("wb") as out:
            shutil.copyfileobj(file.file, out)

        logger.info(
            "image uploaded (file=%s)",
            filename,
            extra={"category": category.value},
        )
        return StoredUpload(
            category=category,
            filename=filename,
            path=path,
            url=self.build_url(category, filename),
        )


def get_uploads_service(request: Request) -> UploadsService:
    """FastAPI DI용 UploadsService 조회 (create_app 에서 app.state 에 올려둔다)."""

    return request.app.state.uploads_service
