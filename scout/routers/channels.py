"""API endpoints for managing subscribed channels."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from scout.core.security import require_admin_secret
from scout.db.models import Channel
from scout.db.session import get_session
from scout.schema.channel import (
    ChannelCreateRequest,
    ChannelListResponse,
    ChannelResponse,
    ChannelToggleRequest,
)
from scout.services.channel_registry import (
    DuplicateChannelError,
    create_channel,
    list_channels,
    set_channel_active,
)
from scout.services.channel_resolver import ChannelResolutionError, extract_channel_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/channels", tags=["channels"], dependencies=[Depends(require_admin_secret)])


def _to_response(channel: Channel) -> ChannelResponse:
    return ChannelResponse(
        channel_id=channel.external_id,
        name=channel.name,
        is_active=channel.is_active,
        last_scanned_at=channel.last_scanned_at,
    )


@router.get("", response_model=ChannelListResponse)
async def list_subscribed_channels(session: AsyncSession = Depends(get_session)) -> ChannelListResponse:
    channels = await list_channels(session)
    return ChannelListResponse(channels=[_to_response(channel) for channel in channels])


@router.post("", response_model=ChannelResponse, status_code=status.HTTP_201_CREATED)
async def add_channel(
    payload: ChannelCreateRequest,
    session: AsyncSession = Depends(get_session),
) -> ChannelResponse:
    try:
        channel_id = extract_channel_id(payload.channel_id)
    except ChannelResolutionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        channel = await create_channel(
            session, channel_id=channel_id, name=payload.name, is_active=payload.is_active
        )
    except DuplicateChannelError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    await session.commit()
    logger.info("Channel subscribed", extra={"channel_id": channel_id})
    return _to_response(channel)


@router.patch("/{channel_id}", response_model=ChannelResponse)
async def toggle_channel(
    channel_id: str,
    payload: ChannelToggleRequest,
    session: AsyncSession = Depends(get_session),
) -> ChannelResponse:
    channel = await set_channel_active(session, channel_id, payload.is_active)
    if channel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not tracked")

    await session.commit()
    logger.info("Channel toggled", extra={"channel_id": channel_id, "is_active": payload.is_active})
    return _to_response(channel)
