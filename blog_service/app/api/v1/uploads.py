from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from ...services.uploads_service import (
    UploadCategory,
    UploadsService,
    get_uploads_service,
)
from ..schemas.uploads import UploadResponse


router = APIRouter()


@router.post(
    "/user",
    response_model=UploadResponse,
    summary="유저 프로필 이미지 업로드",
)
def upload_user_image(
    image: UploadFile | None = File(default=None),
    service: UploadsService = Depends(get_uploads_service),
) -> UploadResponse:
    stored = service.save(UploadCategory.USER, image)
    return UploadResponse(message="User image uploaded", url=stored.url)


@router.post(
    "/post",
    response_model=UploadResponse,
    summary="포스트 커버 이미지 업로드",
)
def upload_post_image(
    image: UploadFile | None = File(default=None),
    service: UploadsService = Depends(get_uploads_service),
) -> UploadResponse:
    stored = service.save(UploadCategory.POST, image)
    return UploadResponse(message="Post image uploaded", url=stored.url)
