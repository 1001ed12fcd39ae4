"""Pydantic models for scan endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from scout.services.scanner import ScanOutcome


class ScanRequest(BaseModel):
    """Inbound payload for an on-demand scan. Validation happens in the trigger."""

    channel_id: str | None = None
    name: str | None = None


class ScanSampleResponse(BaseModel):
    video_id: str
    title: str


class ScanOutcomeResponse(BaseModel):
    channel_id: str
    success: bool
    message: str
    count: int
    sample: ScanSampleResponse | None = None
    error: str | None = None

    @classmethod
    def from_outcome(cls, outcome: ScanOutcome) -> "ScanOutcomeResponse":
        sample = None
        if outcome.sample is not None:
            sample = ScanSampleResponse(video_id=outcome.sample.video_id, title=outcome.sample.title)
        return cls(
            channel_id=outcome.channel_id,
            success=outcome.success,
            message=outcome.message,
            count=outcome.count,
            sample=sample,
            error=outcome.error,
        )


class TickSummaryResponse(BaseModel):
    channels: int
    succeeded: int
    failed: int
    outcomes: list[ScanOutcomeResponse]
