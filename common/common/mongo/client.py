from __future__ import annotations

import logging

from pymongo import MongoClient
from pymongo.database import Database


logger = logging.getLogger(__name__)


def create_client(uri: str) -> MongoClient:
    """MongoClient 를 생성하고 ping 으로 연결을 검증한다.

    전역 싱글톤을 두지 않는다. 생성한 클라이언트는 호출자(앱 lifespan)가 소유하고 닫는다.
    """

    client: MongoClient = MongoClient(uri)

    try:
        client.admin.command("ping")
    except Exception as exc:  # noqa: BLE001
        client.close()
        raise RuntimeError(f"failed to connect to MongoDB: {exc}") from exc

    return client


def resolve_database(client: MongoClient, db_name: str | None) -> Database:
    """사용할 Database 를 결정한다: db_name 우선, 없으면 URI 의 기본 DB."""

    try:
        if db_name:
            db = client[db_name]
        else:
            db = client.get_default_database()
    except Exception as exc:  # noqa: BLE001
        raise RuntimeError(
            "MongoDB database name must be specified via MONGO_DB_NAME or in MONGO_URI (mongodb://.../db_name)",
        ) from exc

    logger.info("MongoDB connected (db=%s)", db.name)
    return db
