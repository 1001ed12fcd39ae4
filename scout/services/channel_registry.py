"""Helpers for managing subscribed channels."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from scout.db.models import Channel


@dataclass(slots=True, frozen=True)
class ChannelRef:
    """The slice of a channel a scan needs: its feed identifier and a display name."""

    external_id: str
    name: str


class DuplicateChannelError(ValueError):
    """Raised when subscribing a channel that is already tracked."""


async def list_channels(session: AsyncSession) -> Sequence[Channel]:
    """Return all channels ordered by creation time (newest first)."""

    result = await session.scalars(select(Channel).order_by(Channel.created_at.desc(), Channel.id.desc()))
    return list(result)


async def list_active_channels(session: AsyncSession) -> list[ChannelRef]:
    """Return identifier and name for every channel flagged active."""

    result = await session.execute(
        select(Channel.external_id, Channel.name).where(Channel.is_active.is_(True)).order_by(Channel.id)
    )
    return [ChannelRef(external_id=external_id, name=name) for external_id, name in result.all()]


async def get_channel(session: AsyncSession, channel_id: str) -> Channel | None:
    """Fetch a channel by external identifier."""

    return await session.scalar(select(Channel).where(Channel.external_id == channel_id))


async def create_channel(
    session: AsyncSession,
    *,
    channel_id: str,
    name: str | None = None,
    is_active: bool = True,
) -> Channel:
    """Subscribe a new channel; raises DuplicateChannelError when it already exists."""

    if await get_channel(session, channel_id) is not None:
        raise DuplicateChannelError(f"Channel already tracked: {channel_id}")

    channel = Channel(external_id=channel_id, name=name or channel_id, is_active=is_active)
    session.add(channel)
    await session.flush()
    return channel


async def set_channel_active(session: AsyncSession, channel_id: str, is_active: bool) -> Channel | None:
    """Flip the active flag; returns None when the channel is unknown."""

    channel = await get_channel(session, channel_id)
    if channel is None:
        return None
    channel.is_active = is_active
    await session.flush()
    return channel


async def mark_channel_scanned(session: AsyncSession, channel_id: str, when: datetime) -> None:
    """Record a successful scan. Unknown (ad-hoc) channels are left alone."""

    await session.execute(
        update(Channel).where(Channel.external_id == channel_id).values(last_scanned_at=when)
    )
