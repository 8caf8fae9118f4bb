from __future__ import annotations

import os
from dataclasses import dataclass


MONGO_URI_ENV = "MONGO_URI"
MONGO_DB_NAME_ENV = "MONGO_DB_NAME"


@dataclass(slots=True)
class MongoConfig:
    """MongoDB 접속 설정."""

    uri: str
    db_name: str | None = None


def load_mongo_config() -> MongoConfig:
    """환경 변수에서 MongoDB 접속 설정을 읽는다.

    - MONGO_URI 는 필수이며, 없으면 서비스가 즉시 실패하도록 RuntimeError 를 발생시킨다.
    - MONGO_DB_NAME 이 비어 있으면 None 으로 두고, URI 의 기본 DB 를 사용한다.
    """

    uri = os.getenv(MONGO_URI_ENV, "").strip()
    if not uri:
        raise RuntimeError(
            f"{MONGO_URI_ENV} environment variable is required for MongoDB",
        )

    db_name = os.getenv(MONGO_DB_NAME_ENV, "").strip() or None
    return MongoConfig(uri=uri, db_name=db_name)
