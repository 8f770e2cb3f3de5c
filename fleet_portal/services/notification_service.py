# fleet_portal/services/notification_service.py
"""
Shared notification service.
Used by booking_service and user_service for workflow events (booking requested,
approved, key issued, vehicle returned, damage reported, ...).

Fire-and-forget: the notification is always logged, and POSTed as JSON to
NOTIFY_WEBHOOK_URL when one is configured. Delivery problems are logged and
swallowed, so a failed toast never fails the booking action that caused it.
"""

import httpx
from datetime import datetime, timezone
from fleet_portal.config import settings
from fleet_portal.utils.logger import get_logger

logger = get_logger(__name__)

SEVERITY_LEVELS = {
    "info": "info",
    "success": "info",
    "warning": "warning",
    "error": "error",
    "destructive": "error",
}


async def notify(title: str, description: str, severity: str = "info", **metadata) -> None:
    """Log a notification and forward it to the webhook, if any."""
    level = SEVERITY_LEVELS.get(severity, "info")
    getattr(logger, level)(f"[NOTIFY][{severity.upper()}] {title}: {description}")

    if not settings.NOTIFY_WEBHOOK_URL:
        return

    payload = {
        "title": title,
        "description": description,
        "severity": severity,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "metadata": metadata,
    }
    try:
        async with httpx.AsyncClient(timeout=settings.NOTIFY_TIMEOUT_SECONDS) as client:
            response = await client.post(settings.NOTIFY_WEBHOOK_URL, json=payload)
            if response.status_code >= 400:
                logger.warning(f"[NOTIFY] Webhook returned HTTP {response.status_code} for '{title}'")
    except httpx.HTTPError as e:
        logger.error(f"[NOTIFY] Webhook delivery failed for '{title}': {e}")
