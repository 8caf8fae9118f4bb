from __future__ import annotations

from datetime import datetime, timezone


def to_utc(value: datetime) -> datetime:
    """tzinfo 가 없으면 UTC 로 간주하고, 있으면 UTC 로 변환한다."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_iso8601_millis(value: datetime) -> str:
    """UTC 밀리초 정밀도 ISO8601 문자열로 직렬화한다. (예: 2025-01-02T03:04:05.678Z)

    브라우저의 Date.toISOString() 과 같은 형태라 프론트엔드에서 그대로 파싱된다.
    """
    value = to_utc(value)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return format_iso8601_millis(datetime.now(timezone.utc))
