from __future__ import annotations

import math
from datetime import datetime

from common.types.datetime import format_iso8601_millis, utc_now_iso

from ..models.post import Like, Post, PostDraft


PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1506744038136-46273834b3fb"
    "?auto=format&fit=crop&w=800&q=80"
)
WORDS_PER_MINUTE = 200
# 본문이 비어 있을 때 읽기 시간 계산에 쓰는 대체 텍스트 (결과는 항상 "1 min read")
EMPTY_DESCRIPTION_FALLBACK = "temp"


def calculate_read_time(text: str) -> str:
    """공백 기준 단어 수로 읽기 시간을 계산한다. 최소 1분."""

    words = len(text.split())
    minutes = max(1, math.ceil(words / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def normalize_draft(draft: PostDraft, now: datetime | None = None) -> Post:
    """생성 요청 초안에 기본값을 채워 저장 가능한 Post 로 만든다.

    저장소를 호출하지 않는 순수 함수다. 빈 문자열 같은 falsy 값도 "없음"으로 본다.
    """

    date = draft.date or (
        format_iso8601_millis(now) if now is not None else utc_now_iso()
    )
    read_time = draft.read_time or calculate_read_time(
        draft.description or EMPTY_DESCRIPTION_FALLBACK
    )

    return Post(
        id=None,
        image=draft.image or PLACEHOLDER_IMAGE_URL,
        category=draft.category,
        title=draft.title,
        description=draft.description,
        author=draft.author,
        date=date,
        like=draft.like or Like(count=0, is_liked=False),
        read_time=read_time,
    )
