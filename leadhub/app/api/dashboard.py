"""Dashboard metrics and client timeline endpoints."""

from calendar import monthrange
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends

from leadhub.app.core.errors import ValidationError
from leadhub.app.core.time import timestamp, utc_now
from leadhub.app.db.gateway import Gateway
from leadhub.app.db.query import FilterBuilder
from leadhub.app.db.session import get_gateway
from leadhub.app.dependencies.auth import Identity, require_session
from leadhub.app.schemas.dashboard import DashboardMetrics
from leadhub.app.schemas.event import EventRead
from leadhub.app.services.clients import decode_tags
from leadhub.app.services.events import list_events

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

RECENT_SIGNUPS_LIMIT = 20


def _parse_business_filter(business_id: Optional[str]) -> Optional[int]:
    # The SPA sends "null"/"undefined" when no business is selected
    if business_id in (None, "", "null", "undefined"):
        return None
    try:
        return int(business_id)
    except ValueError:
        raise ValidationError(
            errors=[{"field": "business_id", "message": "business_id must be an integer"}]
        ) from None


def _month_before(moment: datetime) -> datetime:
    """Same day one calendar month earlier, clamped to the end of a shorter month."""
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _scoped(business_id: Optional[int]) -> FilterBuilder:
    filters = FilterBuilder()
    if business_id is not None:
        filters.add("business_id = :business_id", business_id=business_id)
    return filters


def _count(gateway: Gateway, business_id: Optional[int], extra: Optional[str] = None, **params) -> int:
    filters = _scoped(business_id)
    if extra:
        filters.add(extra, **params)
    row = gateway.exec_one(f"SELECT COUNT(*) AS count FROM clients WHERE {filters.where_clause()}", filters.params)
    return row["count"] if row else 0


def _breakdown(gateway: Gateway, business_id: Optional[int], column: str) -> dict[str, int]:
    filters = _scoped(business_id)
    rows = gateway.exec_rows(
        f"SELECT {column} AS bucket, COUNT(*) AS count FROM clients WHERE {filters.where_clause()} GROUP BY {column}",
        filters.params,
    )
    return {row["bucket"]: row["count"] for row in rows if row["bucket"] is not None}


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(
    business_id: Optional[str] = None,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    scope = _parse_business_filter(business_id)
    now = utc_now()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = start_of_day - timedelta(days=7)
    month_ago = _month_before(start_of_day)

    signups_today = _count(gateway, scope, "created_at >= :since", since=timestamp(start_of_day))
    signups_week = _count(gateway, scope, "created_at >= :since", since=timestamp(week_ago))
    signups_month = _count(gateway, scope, "created_at >= :since", since=timestamp(month_ago))
    total = _count(gateway, scope)
    by_status = _breakdown(gateway, scope, "status")
    by_source = _breakdown(gateway, scope, "source")

    filters = _scoped(scope)
    last_signups = gateway.exec_rows(
        "SELECT id, full_name, email, phone, status, source, tags, created_at FROM clients "
        f"WHERE {filters.where_clause()} ORDER BY created_at DESC, id DESC LIMIT :limit",
        {**filters.params, "limit": RECENT_SIGNUPS_LIMIT},
    )
    for row in last_signups:
        row["tags"] = decode_tags(row["tags"])

    return {
        "signupsToday": signups_today,
        "signupsThisWeek": signups_week,
        "signupsThisMonth": signups_month,
        "totalClients": total,
        "clientsByStatus": by_status,
        "clientsBySource": by_source,
        "lastSignups": last_signups,
    }


@router.get("/client/{client_id}/timeline", response_model=list[EventRead])
async def get_timeline(
    client_id: int,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    return list_events(gateway, client_id)
