from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from bson import ObjectId
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pymongo import ReturnDocument

from blog_service.app.config import (
    AppConfig,
    CorsConfig,
    SessionGateConfig,
    UploadConfig,
)
from blog_service.app.main import create_app
from blog_service.app.models.post import Post
from blog_service.app.repositories.post_repository import PostRepository
from blog_service.app.services.posts_service import PostsService, get_post_repository


class FakeCollection:
    """PostRepository 가 호출하는 pymongo Collection 메서드만 흉내 낸다."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.calls: list[str] = []

    def insert_many(self, docs: list[dict], ordered: bool = True) -> SimpleNamespace:
        self.calls.append("insert_many")
        ids = []
        for doc in docs:
            stored = dict(doc)
            stored["_id"] = ObjectId()
            stored["__v"] = 0
            self.docs.append(stored)
            ids.append(stored["_id"])
        return SimpleNamespace(inserted_ids=ids)

    def find(self, flt: dict) -> list[dict]:
        self.calls.append("find")
        return list(self.docs)

    def find_one(self, flt: dict) -> dict | None:
        self.calls.append("find_one")
        return next((d for d in self.docs if d["_id"] == flt["_id"]), None)

    def find_one_and_update(
        self, flt: dict, update: dict, return_document: Any = None
    ) -> dict | None:
        self.calls.append("find_one_and_update")
        assert return_document == ReturnDocument.AFTER
        doc = self.find_one(flt)
        if doc is None:
            return None
        for key, value in update.get("$set", {}).items():
            doc[key] = value
        for key, value in update.get("$inc", {}).items():
            outer, inner = key.split(".")
            doc[outer][inner] += value
        return doc

    def find_one_and_delete(self, flt: dict) -> dict | None:
        self.calls.append("find_one_and_delete")
        doc = self.find_one(flt)
        if doc is not None:
            self.docs.remove(doc)
        return doc

    def delete_many(self, flt: dict) -> SimpleNamespace:
        self.calls.append("delete_many")
        count = len(self.docs)
        self.docs.clear()
        return SimpleNamespace(deleted_count=count)



class FakePostRepository:
    """PostRepositoryInterface 의 인메모리 구현. 삽입 순서를 유지한다."""

    def __init__(self) -> None:
        self.posts: dict[str, Post] = {}
        self.insert_calls: list[int] = []
        self.increment_calls: list[tuple[str, int]] = []
        self.fail_with: Exception | None = None

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def insert_many(self, posts: list[Post]) -> list[Post]:
        self._maybe_fail()
        self.insert_calls.append(len(posts))
        created: list[Post] = []
        for post in posts:
            stored = post.model_copy(update={"id": str(ObjectId())}, deep=True)
            self.posts[stored.id] = stored
            created.append(stored.model_copy(deep=True))
        return created

    def list_all(self) -> list[Post]:
        self._maybe_fail()
        return [post.model_copy(deep=True) for post in self.posts.values()]

    def find_by_id(self, id_value: str) -> Post | None:
        self._maybe_fail()
        post = self.posts.get(id_value)
        return post.model_copy(deep=True) if post else None

    def update_fields(self, id_value: str, updates: dict) -> Post | None:
        self._maybe_fail()
        post = self.posts.get(id_value)
        if post is None:
            return None
        merged = post.model_dump(by_alias=True)
        merged.update(updates)
        updated = Post.model_validate(merged)
        self.posts[id_value] = updated
        return updated.model_copy(deep=True)

    def increment_like(self, id_value: str, delta: int) -> Post | None:
        self._maybe_fail()
        self.increment_calls.append((id_value, delta))
        post = self.posts.get(id_value)
        if post is None:
            return None
        post.like.count += delta
        return post.model_copy(deep=True)

    def delete_by_id(self, id_value: str) -> Post | None:
        self._maybe_fail()
        return self.posts.pop(id_value, None)

    def delete_all(self) -> int:
        self._maybe_fail()
        count = len(self.posts)
        self.posts.clear()
        return count


@pytest.fixture
def repo() -> FakePostRepository:
    return FakePostRepository()


@pytest.fixture
def service(repo: FakePostRepository) -> PostsService:
    return PostsService(repo)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        port=5000,
        max_body_bytes=1024 * 1024,
        cors=CorsConfig(allowed_origins=["http://localhost:3000"]),
        upload=UploadConfig(
            root_dir=tmp_path / "uploads",
            base_url="http://testserver.local",
        ),
        session_gate=SessionGateConfig(url=None, public_paths=["/health", "/uploads"]),
    )


@pytest.fixture
def app(app_config: AppConfig, repo: FakePostRepository) -> FastAPI:
    application = create_app(config=app_config)
    application.dependency_overrides[get_post_repository] = lambda: repo
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    # lifespan(MongoDB 연결)을 타지 않도록 컨텍스트 매니저 없이 사용한다.
    return TestClient(app)


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def mongo_client(app_config: AppConfig, collection: FakeCollection) -> TestClient:
    """실제 PostRepository 를 FakeCollection 위에 올린 클라이언트."""
    application = create_app(config=app_config)
    post_repo = PostRepository({"posts": collection})  # type: ignore[arg-type]
    application.dependency_overrides[get_post_repository] = lambda: post_repo
    return TestClient(application)
