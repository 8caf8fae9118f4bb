from __future__ import annotations

from pymongo import ReturnDocument
from pymongo.database import Database

from common.mongo.types import from_object_id, try_object_id

from ..models.post import Post
from .documents.post_document import PostDocument
from .interfaces import PostRepositoryInterface


class PostRepository(PostRepositoryInterface):
    """posts 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        """Mongo Database를 의존성으로 받고, posts 컬렉션을 내부에서 선택한다."""

        self._db = database
        self._col = database["posts"]

    # --- helpers -----------------------------------------------------------------
    @staticmethod
    def _to_document(post: Post) -> dict:
        return PostDocument.from_domain(post).to_mongo_record()

    @staticmethod
    def _from_document(doc: dict) -> Post:
        return PostDocument.model_validate(doc).to_domain()

    # --- commands ----------------------------------------------------------------
    def insert_many(self, posts: list[Post]) -> list[Post]:
        """posts 를 한 번의 insert_many 로 저장하고 id 가 채워진 사본을 반환한다."""

        if not posts:
            return []

        docs = [self._to_document(post) for post in posts]
        result = self._col.insert_many(docs, ordered=True)

        return [
            post.model_copy(update={"id": from_object_id(inserted_id)})
            for post, inserted_id in zip(posts, result.inserted_ids)
        ]

    def update_fields(self, id_value: str, updates: dict) -> Post | None:
        oid = try_object_id(id_value)
        if oid is None:
            return None

        # 바꿀 필드가 없으면 $set 이 비어 에러가 나므로 현재 값을 그대로 돌려준다.
        if not updates:
            return self.find_by_id(id_value)

        doc = self._col.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def increment_like(self, id_value: str, delta: int) -> Post | None:
        oid = try_object_id(id_value)
        if oid is None:
            return None

        doc = self._col.find_one_and_update(
            {"_id": oid},
            {"$inc": {"like.count": delta}},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def delete_by_id(self, id_value: str) -> Post | None:
        oid = try_object_id(id_value)
        if oid is None:
            return None

        doc = self._col.find_one_and_delete({"_id": oid})
        if not doc:
            return None
        return self._from_document(doc)

    def delete_all(self) -> int:
        result = self._col.delete_many({})
        return result.deleted_count

    # --- queries -----------------------------------------------------------------
    def list_all(self) -> list[Post]:
        items: list[Post] = []
        for doc in self._col.find({}):
            items.append(self._from_document(doc))
        return items

    def find_by_id(self, id_value: str) -> Post | None:
        oid = try_object_id(id_value)
        if oid is None:
            return None

        doc = self._col.find_one({"_id": oid})
        if not doc:
            return None
        return self._from_document(doc)
