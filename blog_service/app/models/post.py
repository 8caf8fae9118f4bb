from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Author(BaseModel):
    """작성자 값 객체 (users 컬렉션을 참조하지 않는 비정규화 데이터)"""

    name: str | None = None
    img: str | None = None


class Like(BaseModel):
    """좋아요 상태. count 는 PATCH(+1/-1)로만 바뀐다."""

    model_config = ConfigDict(populate_by_name=True)

    count: int = 0
    is_liked: bool = Field(default=False, alias="isliked")


class Post(BaseModel):
    """게시글 도메인 모델 (API/저장소에서 공통 사용)"""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    image: str
    category: str | None = None
    title: str | None = None
    description: str | None = None
    author: Author | None = None
    date: str
    like: Like = Field(default_factory=Like)
    read_time: str = Field(alias="readTime")


class PostDraft(BaseModel):
    """클라이언트가 보낸 생성 요청 본문. 기본값은 post_defaults.normalize_draft 가 채운다."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    image: str | None = None
    category: str | None = None
    title: str | None = None
    description: str | None = None
    author: Author | None = None
    date: str | None = None
    like: Like | None = None
    read_time: str | None = Field(default=None, alias="readTime")


# Mongo 필드 이름 기준으로 null 을 허용하지 않는 필드
REQUIRED_POST_FIELDS = ("image", "date", "readTime")


class PostUpdate(BaseModel):
    """PUT 본문. 보낸 필드만 덮어쓴다. id 와 like 는 받지 않는다."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    image: str | None = None
    category: str | None = None
    title: str | None = None
    description: str | None = None
    author: Author | None = None
    date: str | None = None
    read_time: str | None = Field(default=None, alias="readTime")

    def to_updates(self) -> dict:
        """Mongo $set 에 바로 넣을 수 있는 {필드명: 값} dict 로 변환한다.

        image, date, readTime 은 저장 문서에서 필수이므로 null 을 보내면 기존 값을 유지한다.
        """

        updates = self.model_dump(by_alias=True, exclude_unset=True)
        for key in REQUIRED_POST_FIELDS:
            if key in updates and updates[key] is None:
                del updates[key]
        return updates
