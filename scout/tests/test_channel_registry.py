"""Tests for the channel registry helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from scout.db.models import Channel
from scout.services import channel_registry
from scout.services.channel_registry import ChannelRef, DuplicateChannelError


@pytest.mark.asyncio
async def test_create_channel_defaults_name_and_rejects_duplicates(session: AsyncSession) -> None:
    channel_id = "UC" + "A" * 22
    channel = await channel_registry.create_channel(session, channel_id=channel_id)
    assert isinstance(channel, Channel)
    assert channel.name == channel_id
    assert channel.is_active is True
    assert channel.last_scanned_at is None

    with pytest.raises(DuplicateChannelError):
        await channel_registry.create_channel(session, channel_id=channel_id, name="Again")


@pytest.mark.asyncio
async def test_list_active_channels_skips_inactive(session: AsyncSession) -> None:
    await channel_registry.create_channel(session, channel_id="UCactive", name="Active")
    await channel_registry.create_channel(session, channel_id="UCpaused", name="Paused", is_active=False)

    active = await channel_registry.list_active_channels(session)
    assert active == [ChannelRef(external_id="UCactive", name="Active")]

    everything = await channel_registry.list_channels(session)
    assert {channel.external_id for channel in everything} == {"UCactive", "UCpaused"}


@pytest.mark.asyncio
async def test_set_channel_active_toggles_flag(session: AsyncSession) -> None:
    await channel_registry.create_channel(session, channel_id="UCtoggle")

    channel = await channel_registry.set_channel_active(session, "UCtoggle", False)
    assert channel is not None and channel.is_active is False
    assert await channel_registry.list_active_channels(session) == []

    assert await channel_registry.set_channel_active(session, "UCmissing", True) is None


@pytest.mark.asyncio
async def test_mark_channel_scanned_ignores_unknown_channels(session: AsyncSession) -> None:
    await channel_registry.create_channel(session, channel_id="UCknown")
    when = datetime(2024, 1, 1, tzinfo=timezone.utc)

    await channel_registry.mark_channel_scanned(session, "UCknown", when)
    await channel_registry.mark_channel_scanned(session, "UCunknown", when)
    await session.commit()

    channel = await channel_registry.get_channel(session, "UCknown")
    assert channel is not None
    assert channel.last_scanned_at.replace(tzinfo=None) == datetime(2024, 1, 1)
    assert await channel_registry.get_channel(session, "UCunknown") is None
