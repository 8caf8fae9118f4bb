from __future__ import annotations

from typing import Annotated, Any

from pydantic.functional_validators import BeforeValidator


def _to_object_id_str(value: Any) -> Any:
    """ObjectId 를 응답용 문자열 ID 로 바꾼다. None 이나 문자열은 그대로 둔다."""

    if value is None or isinstance(value, str):
        return value
    return str(value)


ObjectIdStr = Annotated[str, BeforeValidator(_to_object_id_str)]
