# fleet_portal/routers/security_logs.py
"""
Security audit log: filtered listing and CSV download.
Read-only. Entries are only ever appended by the booking workflow.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from fleet_portal.database import get_db
from fleet_portal.routers.deps import get_actor
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.security_log import LogType, RangeLabel, SecurityLogFilter, SecurityLogOut
from fleet_portal.services.csv_export import build_csv, export_filename
from fleet_portal.services.security_log_service import SecurityLogService
from fleet_portal.utils.logger import get_logger
from fleet_portal.utils.time_utils import utcnow

logger = get_logger(__name__)

router = APIRouter()


def log_filter(
    types: Optional[list[LogType]] = Query(None, alias="type"),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    range_label: Optional[RangeLabel] = Query(None, alias="range"),
    location: Optional[str] = None,
    q: Optional[str] = None,
) -> SecurityLogFilter:
    return SecurityLogFilter(types=types, start=start, end=end, range_label=range_label,
                             location=location, free_text=q)


@router.get("/security-logs", response_model=list[SecurityLogOut], summary="Query the security log")
def list_security_logs(filters: SecurityLogFilter = Depends(log_filter),
                       actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    """Newest first. Admin and security staff see their own location only."""
    return SecurityLogService.for_session(db).query(actor, filters)


@router.get("/security-logs/export", summary="Download the security log as CSV")
def export_security_logs(filters: SecurityLogFilter = Depends(log_filter),
                         actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    now = utcnow()
    entries = SecurityLogService.for_session(db).query(actor, filters, now)
    filename = export_filename(filters.range_label, now.date())
    logger.info(f"[EXPORT] {len(entries)} security log rows -> {filename}")
    return Response(
        content=build_csv(entries).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
