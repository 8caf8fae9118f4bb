from __future__ import annotations

from typing import Protocol

from ..models.post import Post


class PostRepositoryInterface(Protocol):
    """PostRepository가 따라야 할 최소한의 계약.

    Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo, 테스트용 인메모리 등)은 몰라도 된다.
    id 형식이 잘못된 경우는 "없음"과 동일하게 None/False 로 취급한다.
    """

    def insert_many(self, posts: list[Post]) -> list[Post]:  # pragma: no cover - Protocol
        """한 번의 배치로 저장하고, id 가 채워진 Post 목록을 반환한다."""
        ...

    def list_all(self) -> list[Post]:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, id_value: str) -> Post | None:  # pragma: no cover - Protocol
        ...

    def update_fields(
        self, id_value: str, updates: dict
    ) -> Post | None:  # pragma: no cover - Protocol
        """updates 를 덮어쓰고 갱신된 Post 를 반환한다."""
        ...

    def increment_like(
        self, id_value: str, delta: int
    ) -> Post | None:  # pragma: no cover - Protocol
        """like.count 에 delta 를 원자적으로 더하고 갱신된 Post 를 반환한다."""
        ...

    def delete_by_id(self, id_value: str) -> Post | None:  # pragma: no cover - Protocol
        """삭제된 Post 를 반환한다."""
        ...

    def delete_all(self) -> int:  # pragma: no cover - Protocol
        """삭제된 도큐먼트 수를 반환한다."""
        ...
