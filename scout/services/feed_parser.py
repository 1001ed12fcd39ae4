"""Turn a channel feed document into an ordered list of entries."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import feedparser

from scout.db.models import VIDEO_ID_MAX_LENGTH

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class FeedEntry:
    """One item listed in a channel feed."""

    video_id: str
    title: str
    published_at: datetime | None


def normalise_entries(raw: Any) -> list[Any]:
    """Collapse the entry collection to a list.

    A feed with one item may expose it as a bare mapping; a feed with several
    exposes a sequence. Everything downstream only ever sees a list.
    """

    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return [raw]
    if isinstance(raw, (list, tuple)):
        return list(raw)
    logger.warning("Unexpected feed entry container", extra={"type": type(raw).__name__})
    return []


def parse_published(entry: Mapping[str, Any]) -> datetime | None:
    """Convert feed published timestamp to timezone-aware datetime."""

    struct_time = entry.get("published_parsed")
    if not struct_time:
        return None
    return datetime(*struct_time[:6], tzinfo=timezone.utc)


def video_identity(entry: Mapping[str, Any]) -> tuple[str | None, str]:
    """Return (video_id, title) from a feed entry."""

    video_id = entry.get("yt_videoid") or entry.get("video_id") or entry.get("id")
    title = entry.get("title") or ""
    if video_id and video_id.startswith("yt:video:"):
        video_id = video_id.split(":")[-1]
    return video_id, title


def entries_from_feed(raw_entries: Any) -> list[FeedEntry]:
    """Build FeedEntry objects in feed order, dropping entries without a storable id."""

    entries: list[FeedEntry] = []
    for raw in normalise_entries(raw_entries):
        video_id, title = video_identity(raw)
        if not video_id:
            logger.debug("Skipping feed entry without an id")
            continue
        if len(video_id) > VIDEO_ID_MAX_LENGTH:
            logger.warning("Skipping feed entry with over-long id", extra={"length": len(video_id)})
            continue
        entries.append(FeedEntry(video_id=video_id, title=title, published_at=parse_published(raw)))
    return entries


def parse_feed(payload: bytes) -> list[FeedEntry]:
    """Parse an RSS/Atom document. Malformed documents yield no entries."""

    parsed = feedparser.parse(payload)
    if parsed.get("bozo") and not parsed.get("entries"):
        logger.warning(
            "Feed document could not be parsed",
            extra={"error": str(parsed.get("bozo_exception", ""))},
        )
        return []
    return entries_from_feed(parsed.get("entries"))
