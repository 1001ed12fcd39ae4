"""Pydantic models for channel management API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ChannelCreateRequest(BaseModel):
    """Inbound payload to start tracking a channel."""

    channel_id: str = Field(..., min_length=1, description="YouTube channel UC id or channel/feed URL")
    name: str | None = Field(None, description="Display name; defaults to the channel id")
    is_active: bool = True


class ChannelToggleRequest(BaseModel):
    """Inbound payload to enable or disable scheduled scans for a channel."""

    is_active: bool


class ChannelResponse(BaseModel):
    """Representation of a subscribed channel."""

    channel_id: str
    name: str
    is_active: bool
    last_scanned_at: datetime | None = None


class ChannelListResponse(BaseModel):
    """Wrapper containing subscribed channels."""

    channels: list[ChannelResponse]
