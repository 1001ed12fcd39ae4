"""Shared-secret guard for administrative routes."""

from __future__ import annotations

import hmac
import logging

from fastapi import Header, HTTPException, status

from scout.core.config import settings

logger = logging.getLogger(__name__)

ADMIN_SECRET_HEADER = "X-Admin-Secret"


async def require_admin_secret(
    x_admin_secret: str | None = Header(None, alias=ADMIN_SECRET_HEADER),
) -> None:
    """Reject the request unless it carries the configured admin secret."""

    expected = settings.admin_secret
    if not expected or not x_admin_secret or not hmac.compare_digest(expected.encode(), x_admin_secret.encode()):
        logger.warning("Rejected administrative request")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
