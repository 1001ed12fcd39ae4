"""Scan one channel feed and record newly published videos as pending work."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scout.core.config import Settings, settings
from scout.db.models import VIDEO_STATUS_PENDING
from scout.services.channel_registry import mark_channel_scanned
from scout.services.feed_parser import FeedEntry, parse_feed
from scout.services.video_store import upsert_videos

logger = logging.getLogger(__name__)

FETCH_ERROR = "fetch"
STORE_ERROR = "store"

# asyncpg surfaces refused connections as bare OSErrors.
STORE_ERRORS = (SQLAlchemyError, OSError)


@dataclass(slots=True, frozen=True)
class ScanSample:
    """The newest entry seen during a scan, echoed back for user feedback."""

    video_id: str
    title: str


@dataclass(slots=True)
class ScanOutcome:
    """Result of scanning one channel. Never raised, always returned."""

    channel_id: str
    success: bool
    message: str
    count: int = 0
    sample: ScanSample | None = None
    error: str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChannelScanner:
    """Fetches a channel feed, stores unseen entries and stamps the channel.

    Every failure mode is folded into the returned ScanOutcome so the
    scheduler and the on-demand trigger never need exception handling.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        feed_url_template: str,
        video_url_template: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._client = client
        self._session_factory = session_factory
        self._feed_url_template = feed_url_template
        self._video_url_template = video_url_template
        self._clock = clock

    def feed_url(self, channel_id: str) -> str:
        return self._feed_url_template.format(channel_id=channel_id)

    def video_url(self, video_id: str) -> str:
        return self._video_url_template.format(video_id=video_id)

    def build_rows(self, channel_id: str, entries: list[FeedEntry], *, now: datetime) -> list[dict]:
        return [
            {
                "video_id": entry.video_id,
                "title": entry.title,
                "url": self.video_url(entry.video_id),
                "channel_external_id": channel_id,
                "status": VIDEO_STATUS_PENDING,
                "created_at": entry.published_at or now,
            }
            for entry in entries
        ]

    async def _fetch(self, channel_id: str) -> tuple[bytes | None, ScanOutcome | None]:
        url = self.feed_url(channel_id)
        try:
            response = await self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Feed request failed", extra={"channel_id": channel_id, "url": url, "error": str(exc)})
            return None, ScanOutcome(
                channel_id=channel_id,
                success=False,
                message=f"Fetch failed: {exc.__class__.__name__}: {exc}",
                error=FETCH_ERROR,
            )

        if not response.is_success:
            logger.warning(
                "Feed returned non-success status",
                extra={"channel_id": channel_id, "url": url, "status_code": response.status_code},
            )
            return None, ScanOutcome(
                channel_id=channel_id,
                success=False,
                message=f"Fetch failed: HTTP {response.status_code}",
                error=FETCH_ERROR,
            )
        return response.content, None

    async def _store(self, channel_id: str, rows: list[dict], *, now: datetime) -> ScanOutcome | None:
        # Closing the session rolls back whatever stage did not commit.
        stage = "upsert"
        try:
            async with self._session_factory() as session:
                if rows:
                    await upsert_videos(session, rows)
                    await session.commit()
                stage = "timestamp"
                await mark_channel_scanned(session, channel_id, now)
                await session.commit()
        except STORE_ERRORS as exc:
            logger.exception("Store write failed", extra={"channel_id": channel_id, "stage": stage})
            return ScanOutcome(
                channel_id=channel_id,
                success=False,
                message=f"Store write failed during {stage}: {exc.__class__.__name__}",
                count=len(rows),
                error=STORE_ERROR,
            )
        return None

    async def scan_channel(self, channel_id: str, channel_name: str | None = None) -> ScanOutcome:
        """Run fetch, parse, upsert and stamp for one channel."""

        label = channel_name or channel_id
        body, failure = await self._fetch(channel_id)
        if failure is not None:
            return failure

        entries = parse_feed(body or b"")
        now = self._clock()
        rows = self.build_rows(channel_id, entries, now=now)

        failure = await self._store(channel_id, rows, now=now)
        if failure is not None:
            return failure

        if not entries:
            logger.info("No entries in feed", extra={"channel_id": channel_id})
            return ScanOutcome(channel_id=channel_id, success=True, message=f"No videos found for {label}")

        newest = entries[0]
        logger.info(
            "Channel scanned",
            extra={"channel_id": channel_id, "count": len(entries), "latest_video_id": newest.video_id},
        )
        return ScanOutcome(
            channel_id=channel_id,
            success=True,
            message=f"Successfully scouted {len(entries)} video(s) for {label}; latest: {newest.title}",
            count=len(entries),
            sample=ScanSample(video_id=newest.video_id, title=newest.title),
        )


def create_http_client(config: Settings = settings) -> httpx.AsyncClient:
    """Shared client for feed requests with a bounded per-request timeout."""

    return httpx.AsyncClient(
        headers={"User-Agent": config.user_agent},
        timeout=config.fetch_timeout_seconds,
        follow_redirects=True,
    )


def build_scanner(
    client: httpx.AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
    config: Settings = settings,
) -> ChannelScanner:
    return ChannelScanner(
        client=client,
        session_factory=session_factory,
        feed_url_template=config.feed_url_template,
        video_url_template=config.video_url_template,
    )
