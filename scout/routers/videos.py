"""API endpoints listing discovered videos."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from scout.core.security import require_admin_secret
from scout.db.session import get_session
from scout.schema.video import VideoResponse
from scout.services.video_store import list_videos

router = APIRouter(prefix="/videos", tags=["videos"], dependencies=[Depends(require_admin_secret)])


@router.get("", response_model=list[VideoResponse])
async def list_discovered_videos(
    status: str | None = Query(None, description="Filter by processing status, e.g. pending"),
    channel_id: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
) -> list[VideoResponse]:
    videos = await list_videos(session, status=status, channel_id=channel_id, limit=limit)
    return [
        VideoResponse(
            video_id=video.video_id,
            title=video.title,
            url=video.url,
            channel_id=video.channel_external_id,
            status=video.status,
            created_at=video.created_at,
        )
        for video in videos
    ]
