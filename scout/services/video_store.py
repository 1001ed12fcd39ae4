"""Persistence for discovered feed items."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import CompileError
from sqlalchemy.ext.asyncio import AsyncSession

from scout.db.models import Video

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _dedupe(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    seen: set[str] = set()
    unique: list[dict[str, Any]] = []
    for row in rows:
        if row["video_id"] in seen:
            continue
        seen.add(row["video_id"])
        unique.append(row)
    return unique


async def upsert_videos(session: AsyncSession, rows: Iterable[dict[str, Any]]) -> None:
    """Insert the batch in one statement, skipping any video_id already stored.

    Existing rows are never touched; the first occurrence of a duplicated id
    inside the batch wins.
    """

    batch = _dedupe(rows)
    if not batch:
        return

    dialect = session.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise CompileError(f"Conflict-ignoring insert not supported for {dialect}")

    stmt = insert(Video).values(batch).on_conflict_do_nothing(index_elements=[Video.video_id])
    await session.execute(stmt)
    logger.debug("Upserted video batch", extra={"count": len(batch), "dialect": dialect})


async def list_videos(
    session: AsyncSession,
    *,
    status: str | None = None,
    channel_id: str | None = None,
    limit: int = 50,
) -> Sequence[Video]:
    """Return the most recently discovered videos, newest first."""

    stmt = select(Video)
    if status:
        stmt = stmt.where(Video.status == status)
    if channel_id:
        stmt = stmt.where(Video.channel_external_id == channel_id)
    stmt = stmt.order_by(Video.created_at.desc(), Video.id.desc()).limit(limit)
    result = await session.scalars(stmt)
    return list(result)
