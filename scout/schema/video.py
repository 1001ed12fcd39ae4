"""Pydantic models for video listing endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class VideoResponse(BaseModel):
    video_id: str
    title: str
    url: str
    channel_id: str
    status: str
    created_at: datetime
