from __future__ import annotations

from pydantic import Field

from common.mongo.types import BaseDocument, from_object_id

from ...models.post import Author, Like, Post


class PostDocument(BaseDocument):
    """MongoDB posts 컬렉션 도큐먼트 모델."""

    image: str
    category: str | None = None
    title: str | None = None
    description: str | None = None
    author: Author | None = None
    date: str
    like: Like = Field(default_factory=Like)
    # Mongo 에 저장되는 필드 이름은 프론트엔드와 같은 readTime 을 유지한다.
    read_time: str = Field(alias="readTime")

    @classmethod
    def from_domain(cls, post: Post) -> "PostDocument":
        data = post.model_dump(by_alias=True)
        _id = data.pop("id", None)
        if _id is not None:
            data["_id"] = _id

        return cls.model_validate(data)

    def to_domain(self) -> Post:
        return Post(
            id=from_object_id(self.id),
            image=self.image,
            category=self.category,
            title=self.title,
            description=self.description,
            author=self.author,
            date=self.date,
            like=self.like,
            read_time=self.read_time,
        )
