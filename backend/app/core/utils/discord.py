import asyncio
import logging
import traceback
from datetime import datetime, timezone

import httpx
from fastapi import Request

from app.config import settings

logger = logging.getLogger(__name__)


async def notify_error(request: Request, exc: Exception, track_id: str):
    """
    Post an unexpected error to the configured webhook, if any
    """
    if not settings.ERROR_WEBHOOK_URL:
        return
    error_details = {
        "track_id": track_id,
        "path": request.url.path,
        "method": request.method,
        "user_id": getattr(request.state, "user_id", None),
        "traceback": "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        ),
    }

    await send_webhook_notification(error_details)


async def send_webhook_notification(
    error_details: dict, max_retries: int = 2, retry_delay: float = 1.0
):
    """
    Upload the traceback as a text attachment, retrying with backoff
    """
    if not settings.ERROR_WEBHOOK_URL:
        return

    timestamp = datetime.now(timezone.utc).isoformat()
    error_content = f"""
============================ ERROR DETAILS ============================

Timestamp: {timestamp}
Track ID: {error_details.get("track_id", "N/A")}
Path: {error_details.get("path", "N/A")}
Method: {error_details.get("method", "N/A")}
User ID: {error_details.get("user_id") or "anonymous"}

============================== TRACEBACK ==============================

{error_details.get("traceback", "")}

=======================================================================
"""
    files = {
        "file": (
            "traceback.txt",
            error_content.encode("utf-8"),
            "text/plain",
        ),
    }

    async with httpx.AsyncClient(timeout=10) as client:
        for attempt in range(max_retries):
            try:
                response = await client.post(
                    settings.ERROR_WEBHOOK_URL,
                    data={"content": "Internal Server Error Detected"},
                    files=files,
                )
                response.raise_for_status()
                return
            except httpx.HTTPError as e:
                logger.warning(
                    "Error notification attempt %s failed: %s", attempt + 1, e
                )
                if attempt < max_retries - 1:
                    await asyncio.sleep(retry_delay * (2**attempt))

    logger.error(
        "Failed to send error notification %s after all retries",
        error_details.get("track_id"),
    )
