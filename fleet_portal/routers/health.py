# fleet_portal/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + notification webhook reachability.
"""

import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from fleet_portal.database import get_db
from fleet_portal.config import settings
from fleet_portal.utils.time_utils import utcnow

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Notification webhook reachability ("disabled" when no URL is configured)
    """
    result = {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "notifications": "disabled",
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    # Ping the webhook host; any HTTP answer means it is reachable
    if settings.NOTIFY_WEBHOOK_URL:
        try:
            resp = requests.head(settings.NOTIFY_WEBHOOK_URL, timeout=settings.NOTIFY_TIMEOUT_SECONDS)
            result["notifications"] = "ok" if resp.status_code < 500 else f"http_{resp.status_code}"
        except requests.exceptions.ConnectionError:
            result["notifications"] = "unreachable"
            result["status"] = "degraded"
        except requests.exceptions.RequestException as e:
            result["notifications"] = f"error: {str(e)}"

    return result
