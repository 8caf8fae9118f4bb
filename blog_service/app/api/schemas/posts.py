from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from common.types.objectid import ObjectIdStr

from ...models.post import Author, Like, Post


class PostResponse(BaseModel):
    """포스트 응답 DTO.

    도메인 모델(Post)을 그대로 노출하지 않고, API 경계를 위한 전용 응답 모델을 사용한다.
    필드 이름은 프론트엔드가 쓰는 camelCase(readTime, isliked)를 유지한다.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: ObjectIdStr | None
    image: str
    category: str | None = None
    title: str | None = None
    description: str | None = None
    author: Author | None = None
    date: str
    like: Like
    read_time: str = Field(alias="readTime")

    @classmethod
    def from_domain(cls, post: Post) -> "PostResponse":
        """도메인 Post 모델을 응답 DTO 로 변환한다."""

        return cls.model_validate(post.model_dump())


class CreatePostsResponse(BaseModel):
    success: bool = True
    message: str
    posts: list[PostResponse]


class PostEnvelopeResponse(BaseModel):
    """단건 수정/삭제 응답."""

    success: bool = True
    message: str
    post: PostResponse


class LikeIncrementRequest(BaseModel):
    """좋아요 증감 요청 DTO.

    inc 의 타입 검증(숫자 1 / -1)은 서비스에서 하므로 여기서는 그대로 받는다.
    """

    inc: Any = None


class LikeIncrementResponse(BaseModel):
    success: bool = True
    post: PostResponse


class DeleteAllPostsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    deleted_count: int = Field(alias="deletedCount")
