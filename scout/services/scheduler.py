"""Periodic dispatcher that scans every active channel."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scout.core.config import settings
from scout.services.channel_registry import ChannelRef, list_active_channels
from scout.services.scanner import STORE_ERRORS, ChannelScanner, ScanOutcome

logger = logging.getLogger(__name__)


class ScanInProgressError(RuntimeError):
    """Raised when a tick is requested while another is still running."""


@dataclass(slots=True)
class TickSummary:
    """Aggregated outcomes of one scheduled tick."""

    outcomes: list[ScanOutcome] = field(default_factory=list)

    @property
    def channels(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return self.channels - self.succeeded


async def _scan_isolated(scanner: ChannelScanner, channel: ChannelRef, semaphore: asyncio.Semaphore) -> ScanOutcome:
    async with semaphore:
        try:
            return await scanner.scan_channel(channel.external_id, channel.name)
        except Exception as exc:  # noqa: BLE001 - one channel must never sink the tick
            logger.exception("Unexpected scan error", extra={"channel_id": channel.external_id})
            return ScanOutcome(
                channel_id=channel.external_id,
                success=False,
                message=f"Unexpected error: {exc.__class__.__name__}: {exc}",
            )


async def run_scheduled_scan(
    session_factory: async_sessionmaker[AsyncSession],
    scanner: ChannelScanner,
    *,
    max_concurrency: int | None = None,
) -> TickSummary:
    """Scan all active channels concurrently and wait for every scan to finish."""

    try:
        async with session_factory() as session:
            channels = await list_active_channels(session)
    except STORE_ERRORS:
        logger.exception("Could not load active channels; skipping tick")
        return TickSummary()

    if not channels:
        logger.info("No active channels; nothing to scan")
        return TickSummary()

    limit = max(max_concurrency or settings.scan_max_concurrency, 1)
    semaphore = asyncio.Semaphore(limit)
    logger.info("Starting scheduled scan", extra={"channels": len(channels), "max_concurrency": limit})

    outcomes = await asyncio.gather(*(_scan_isolated(scanner, channel, semaphore) for channel in channels))
    summary = TickSummary(outcomes=list(outcomes))

    for outcome in summary.outcomes:
        if not outcome.success:
            logger.warning(
                "Channel scan failed",
                extra={"channel_id": outcome.channel_id, "reason": outcome.message},
            )
    logger.info(
        "Scheduled scan complete",
        extra={"channels": summary.channels, "succeeded": summary.succeeded, "failed": summary.failed},
    )
    return summary


class ScanScheduler:
    """Background loop that runs a scheduled scan every configured interval.

    Only one tick is in flight at a time; ``run_once`` is also used by the
    manual run endpoint.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        scanner: ChannelScanner,
        *,
        interval_minutes: int | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._scanner = scanner
        self._interval_seconds = max(1, interval_minutes or settings.scan_interval_minutes) * 60
        self._max_concurrency = max_concurrency
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def run_once(self) -> TickSummary:
        if self._lock.locked():
            raise ScanInProgressError("A scheduled scan is already running")
        async with self._lock:
            return await run_scheduled_scan(
                self._session_factory, self._scanner, max_concurrency=self._max_concurrency
            )

    async def _run(self) -> None:
        logger.info("Starting scan scheduler", extra={"interval_seconds": self._interval_seconds})
        while not self._stop_event.is_set():
            try:
                await self.run_once()
            except ScanInProgressError:
                logger.info("Previous scan still running; skipping tick")
            except Exception:  # pragma: no cover - defensive guard
                logger.exception("Scheduled scan iteration failed")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval_seconds)
            except asyncio.TimeoutError:
                continue

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        try:
            await self._task
        finally:
            self._task = None


async def _main() -> None:
    from scout.db.session import SessionLocal, engine
    from scout.services.scanner import build_scanner, create_http_client

    async with create_http_client() as client:
        summary = await run_scheduled_scan(SessionLocal, build_scanner(client, SessionLocal))
    await engine.dispose()
    logger.info("Tick finished: %s ok, %s failed", summary.succeeded, summary.failed)


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    asyncio.run(_main())
