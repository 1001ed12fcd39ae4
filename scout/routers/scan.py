"""Endpoints that run scans on demand."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from scout.core.security import require_admin_secret
from scout.schema.scan import ScanOutcomeResponse, ScanRequest, TickSummaryResponse
from scout.services.scanner import ChannelScanner
from scout.services.scheduler import ScanInProgressError, ScanScheduler
from scout.services.trigger import ScanRequestError, trigger_scan

router = APIRouter(prefix="/scan", tags=["scan"], dependencies=[Depends(require_admin_secret)])


def get_scanner(request: Request) -> ChannelScanner:
    return request.app.state.scanner


def get_scheduler(request: Request) -> ScanScheduler:
    return request.app.state.scheduler


@router.post("", response_model=ScanOutcomeResponse)
async def scan_channel_now(
    payload: ScanRequest,
    scanner: ChannelScanner = Depends(get_scanner),
) -> ScanOutcomeResponse:
    """Scan a single channel immediately. A failed scan still returns 200 with success=false."""

    try:
        outcome = await trigger_scan(scanner, payload.channel_id, payload.name)
    except ScanRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ScanOutcomeResponse.from_outcome(outcome)


@router.post("/run", response_model=TickSummaryResponse)
async def run_scheduled_scan_now(scheduler: ScanScheduler = Depends(get_scheduler)) -> TickSummaryResponse:
    try:
        summary = await scheduler.run_once()
    except ScanInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return TickSummaryResponse(
        channels=summary.channels,
        succeeded=summary.succeeded,
        failed=summary.failed,
        outcomes=[ScanOutcomeResponse.from_outcome(outcome) for outcome in summary.outcomes],
    )
