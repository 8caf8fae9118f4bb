from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, Request
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..exceptions import NotFoundError, PersistenceError, ValidationError
from ..models.post import Post, PostDraft, PostUpdate
from ..repositories.interfaces import PostRepositoryInterface
from ..repositories.post_repository import PostRepository
from .post_defaults import normalize_draft

logger = logging.getLogger(__name__)

ALLOWED_LIKE_DELTAS = (1, -1)


def validate_like_delta(value: Any) -> int:
    """좋아요 증감 값은 JSON 숫자 1 또는 -1 만 허용한다. (bool, 문자열은 거절)"""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Invalid like change value")
    if value not in ALLOWED_LIKE_DELTAS:
        raise ValidationError("Invalid like change value")
    return int(value)


class PostsService:
    """포스트 생성/조회/수정/좋아요/삭제 비즈니스 로직.

    - Repository(PostRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - 저장소 오류는 원인을 로그로 남기고, 클라이언트에는 일반화된 PersistenceError 로 알린다.
    """

    def __init__(self, post_repo: PostRepositoryInterface) -> None:
        self._post_repo = post_repo

    def create_posts(self, drafts: PostDraft | list[PostDraft]) -> list[Post]:
        """초안 하나 또는 여러 개를 기본값 정규화 후 한 번의 배치로 저장한다.

        일부만 저장되는 경우는 없다. 배치 저장이 실패하면 전체 호출이 실패한다.
        """

        if not isinstance(drafts, list):
            drafts = [drafts]
        if not drafts:
            return []

        posts = [normalize_draft(draft) for draft in drafts]

        try:
            created = self._post_repo.insert_many(posts)
        except PyMongoError as exc:
            logger.exception("failed to insert posts (count=%d)", len(posts))
            raise PersistenceError("Error creating post(s)") from exc

        logger.info("posts created (count=%d)", len(created))
        return created

    def list_posts(self) -> list[Post]:
        try:
            return self._post_repo.list_all()
        except PyMongoError as exc:
            logger.exception("failed to list posts")
            raise PersistenceError("Error fetching posts") from exc

    def get_post(self, post_id: str) -> Post:
        try:
            post = self._post_repo.find_by_id(post_id)
        except PyMongoError as exc:
            logger.exception("failed to fetch post", extra={"post_id": post_id})
            raise PersistenceError("Error fetching post") from exc

        if post is None:
            raise NotFoundError("Post not found")
        return post

    def replace_post(self, post_id: str, update: PostUpdate) -> Post:
        """본문에 담긴 필드로 포스트를 덮어쓴다. like 는 여기서 바꿀 수 없다."""

        try:
            post = self._post_repo.update_fields(post_id, update.to_updates())
        except PyMongoError as exc:
            logger.exception("failed to update post", extra={"post_id": post_id})
            raise PersistenceError("Error updating post") from exc

        if post is None:
            raise NotFoundError("Post not found")
        return post

    def increment_like(self, post_id: str, delta: Any) -> Post:
        """like.count 를 +1/-1 만큼 원자적으로 바꾼다.

        0 아래로 내려가는 것을 막지 않는다. 검증에 실패하면 저장소를 호출하지 않는다.
        """

        inc = validate_like_delta(delta)

        try:
            post = self._post_repo.increment_like(post_id, inc)
        except PyMongoError as exc:
            logger.exception("failed to update like", extra={"post_id": post_id})
            raise PersistenceError("Failed to update like") from exc

        if post is None:
            raise NotFoundError("Post not found")
        return post

    def delete_post(self, post_id: str) -> Post:
        try:
            post = self._post_repo.delete_by_id(post_id)
        except PyMongoError as exc:
            logger.exception("failed to delete post", extra={"post_id": post_id})
            raise PersistenceError("Error deleting post") from exc

        if post is None:
            raise NotFoundError("Post not found")
        return post

    def delete_all_posts(self) -> int:
        try:
            deleted = self._post_repo.delete_all()
        except PyMongoError as exc:
            logger.exception("failed to delete all posts")
            raise PersistenceError("Error deleting all posts") from exc

        logger.warning("all posts deleted (count=%d)", deleted)
        return deleted


def get_database(request: Request) -> Database:
    """lifespan 에서 app.state 에 올려둔 Database 를 꺼낸다."""

    database = getattr(request.app.state, "database", None)
    if database is None:
        raise PersistenceError("Database is not available")
    return database


def get_post_repository(
    db: Database = Depends(get_database),
) -> PostRepositoryInterface:
    """FastAPI DI용 PostRepository 팩토리."""

    return PostRepository(db)


def get_posts_service(
    repo: PostRepositoryInterface = Depends(get_post_repository),
) -> PostsService:
    """FastAPI DI용 PostsService 팩토리."""

    return PostsService(repo)
