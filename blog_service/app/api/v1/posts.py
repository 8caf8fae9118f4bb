from __future__ import annotations

from typing import Union

from fastapi import APIRouter, Body, Depends

from ...models.post import PostDraft, PostUpdate
from ...services.posts_service import PostsService, get_posts_service
from ..schemas.posts import (
    CreatePostsResponse,
    DeleteAllPostsResponse,
    LikeIncrementRequest,
    LikeIncrementResponse,
    PostEnvelopeResponse,
    PostResponse,
)


router = APIRouter()


@router.post(
    "",
    status_code=201,
    response_model=CreatePostsResponse,
    summary="포스트 생성 (단건 또는 배열)",
    description=(
        "초안 객체 하나 또는 배열을 받아 기본값(이미지, 날짜, 좋아요, 읽기 시간)을 채운 뒤 "
        "한 번의 배치로 저장한다."
    ),
)
def create_posts(
    body: Union[PostDraft, list[PostDraft]] = Body(...),
    service: PostsService = Depends(get_posts_service),
) -> CreatePostsResponse:
    posts = service.create_posts(body)
    return CreatePostsResponse(
        message="Posts created",
        posts=[PostResponse.from_domain(post) for post in posts],
    )


@router.get(
    "",
    response_model=list[PostResponse],
    summary="포스트 전체 조회",
    description="페이지네이션/필터 없이 모든 포스트를 반환한다.",
)
def list_posts(
    service: PostsService = Depends(get_posts_service),
) -> list[PostResponse]:
    return [PostResponse.from_domain(post) for post in service.list_posts()]


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="단일 포스트 조회",
)
def get_post(
    post_id: str,
    service: PostsService = Depends(get_posts_service),
) -> PostResponse:
    return PostResponse.from_domain(service.get_post(post_id))


@router.put(
    "/{post_id}",
    response_model=PostEnvelopeResponse,
    summary="포스트 수정",
    description="본문에 담긴 필드로 포스트를 덮어쓴다. like 는 PATCH 로만 바꿀 수 있다.",
)
def replace_post(
    post_id: str,
    body: PostUpdate,
    service: PostsService = Depends(get_posts_service),
) -> PostEnvelopeResponse:
    post = service.replace_post(post_id, body)
    return PostEnvelopeResponse(
        message="Post updated",
        post=PostResponse.from_domain(post),
    )


@router.patch(
    "/{post_id}",
    response_model=LikeIncrementResponse,
    summary="좋아요 수 증감",
    description="inc 가 1 이면 좋아요 +1, -1 이면 -1. 그 외 값은 400.",
)
def increment_like(
    post_id: str,
    body: LikeIncrementRequest | None = None,
    service: PostsService = Depends(get_posts_service),
) -> LikeIncrementResponse:
    inc = body.inc if body is not None else None
    post = service.increment_like(post_id, inc)
    return LikeIncrementResponse(post=PostResponse.from_domain(post))


@router.delete(
    "/{post_id}",
    response_model=PostEnvelopeResponse,
    summary="단일 포스트 삭제",
)
def delete_post(
    post_id: str,
    service: PostsService = Depends(get_posts_service),
) -> PostEnvelopeResponse:
    post = service.delete_post(post_id)
    return PostEnvelopeResponse(
        message="Post deleted",
        post=PostResponse.from_domain(post),
    )


@router.delete(
    "",
    response_model=DeleteAllPostsResponse,
    summary="포스트 전체 삭제",
    description="확인 단계 없이 posts 컬렉션을 비운다.",
)
def delete_all_posts(
    service: PostsService = Depends(get_posts_service),
) -> DeleteAllPostsResponse:
    deleted = service.delete_all_posts()
    return DeleteAllPostsResponse(
        message=f"All posts deleted ({deleted} removed)",
        deleted_count=deleted,
    )
