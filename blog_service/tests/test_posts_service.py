from __future__ import annotations

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from blog_service.app.exceptions import NotFoundError, PersistenceError, ValidationError
from blog_service.app.models.post import Like, PostDraft, PostUpdate
from blog_service.app.services.posts_service import PostsService

from conftest import FakePostRepository


def _create_one(service: PostsService, **fields) -> str:
    created = service.create_posts(PostDraft(**fields))
    assert created[0].id is not None
    return created[0].id


def test_create_single_draft_applies_defaults(service: PostsService) -> None:
    created = service.create_posts(PostDraft(title="A", description="word " * 250))

    assert len(created) == 1
    post = created[0]
    assert post.id is not None
    assert post.like == Like(count=0, is_liked=False)
    assert post.read_time == "2 min read"


def test_create_batch_persists_all_in_one_call(
    service: PostsService, repo: FakePostRepository
) -> None:
    drafts = [PostDraft(title=f"post-{i}") for i in range(5)]

    created = service.create_posts(drafts)

    assert repo.insert_calls == [5]
    ids = [post.id for post in created]
    assert len(set(ids)) == 5
    # 이후 조회에서도 같은 id 가 유지된다.
    assert [post.id for post in service.list_posts()] == ids
    for post in created:
        assert service.get_post(post.id).title == post.title


def test_create_empty_batch_skips_store(
    service: PostsService, repo: FakePostRepository
) -> None:
    assert service.create_posts([]) == []
    assert repo.insert_calls == []


def test_create_fails_as_a_whole_on_store_error(
    service: PostsService, repo: FakePostRepository
) -> None:
    repo.fail_with = ServerSelectionTimeoutError("no servers")

    with pytest.raises(PersistenceError, match="Error creating post"):
        service.create_posts([PostDraft(title="a"), PostDraft(title="b")])

    repo.fail_with = None
    assert service.list_posts() == []


def test_get_post_missing_is_not_found(service: PostsService) -> None:
    with pytest.raises(NotFoundError):
        service.get_post(str(ObjectId()))


def test_increment_like_round_trip(service: PostsService) -> None:
    post_id = _create_one(service, title="A")

    liked = service.increment_like(post_id, 1)
    assert liked.like.count == 1

    unliked = service.increment_like(post_id, -1)
    assert unliked.like.count == 0


def test_increment_like_allows_negative_count(service: PostsService) -> None:
    post_id = _create_one(service, title="A")

    post = service.increment_like(post_id, -1)

    assert post.like.count == -1


def test_increment_like_accepts_integral_float(service: PostsService) -> None:
    post_id = _create_one(service, title="A")

    assert service.increment_like(post_id, 1.0).like.count == 1


@pytest.mark.parametrize("delta", [0, 2, -2, 0.5, True, "1", None])
def test_increment_like_rejects_invalid_delta_without_mutation(
    service: PostsService, repo: FakePostRepository, delta: object
) -> None:
    post_id = _create_one(service, title="A")

    with pytest.raises(ValidationError, match="Invalid like change value"):
        service.increment_like(post_id, delta)

    assert repo.increment_calls == []
    assert service.get_post(post_id).like.count == 0


def test_increment_like_missing_post(service: PostsService) -> None:
    with pytest.raises(NotFoundError):
        service.increment_like(str(ObjectId()), 1)


def test_replace_post_overwrites_supplied_fields_only(service: PostsService) -> None:
    post_id = _create_one(service, title="A", category="tech")
    service.increment_like(post_id, 1)

    update = PostUpdate.model_validate(
        {"title": "B", "readTime": "5 min read", "like": {"count": 99}}
    )
    updated = service.replace_post(post_id, update)

    assert updated.id == post_id
    assert updated.title == "B"
    assert updated.category == "tech"
    assert updated.read_time == "5 min read"
    # like 는 PUT 으로 바뀌지 않는다.
    assert updated.like.count == 1


def test_post_update_drops_null_required_fields() -> None:
    update = PostUpdate.model_validate(
        {"image": None, "date": None, "readTime": None, "category": None, "title": "B"}
    )

    assert update.to_updates() == {"category": None, "title": "B"}


def test_post_update_ignores_like_and_id() -> None:
    update = PostUpdate.model_validate({"like": {"count": 99}, "id": "x"})

    assert update.to_updates() == {}


def test_replace_post_missing(service: PostsService) -> None:
    with pytest.raises(NotFoundError):
        service.replace_post(str(ObjectId()), PostUpdate(title="B"))


def test_delete_post_returns_deleted_document(service: PostsService) -> None:
    post_id = _create_one(service, title="A")

    deleted = service.delete_post(post_id)

    assert deleted.id == post_id
    with pytest.raises(NotFoundError):
        service.get_post(post_id)
    with pytest.raises(NotFoundError):
        service.delete_post(post_id)


def test_delete_all_then_list_is_empty(service: PostsService) -> None:
    service.create_posts([PostDraft(title="a"), PostDraft(title="b")])

    assert service.delete_all_posts() == 2
    assert service.list_posts() == []
    assert service.delete_all_posts() == 0


def test_store_errors_are_persistence_errors(
    service: PostsService, repo: FakePostRepository
) -> None:
    repo.fail_with = ServerSelectionTimeoutError("no servers")

    with pytest.raises(PersistenceError, match="Error fetching posts"):
        service.list_posts()
    with pytest.raises(PersistenceError, match="Error fetching post"):
        service.get_post(str(ObjectId()))
    with pytest.raises(PersistenceError, match="Failed to update like"):
        service.increment_like(str(ObjectId()), 1)
    with pytest.raises(PersistenceError, match="Error deleting all posts"):
        service.delete_all_posts()
