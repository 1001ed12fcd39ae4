"""On-demand scan of a single channel, outside the schedule."""

from __future__ import annotations

import logging

from scout.services.channel_registry import ChannelRef
from scout.services.scanner import ChannelScanner, ScanOutcome

logger = logging.getLogger(__name__)


class ScanRequestError(ValueError):
    """Raised when an on-demand scan request is unusable."""


async def trigger_scan(scanner: ChannelScanner, channel_id: str | None, name: str | None = None) -> ScanOutcome:
    """Scan one channel now and hand back the scanner's outcome unchanged.

    The channel does not need to be subscribed; nothing about it is persisted
    besides the videos the scan discovers.
    """

    identifier = (channel_id or "").strip()
    if not identifier:
        raise ScanRequestError("channel_id is required")

    channel = ChannelRef(external_id=identifier, name=(name or "").strip() or identifier)
    logger.info("On-demand scan requested", extra={"channel_id": channel.external_id})
    return await scanner.scan_channel(channel.external_id, channel.name)
