"""CSV export of clients."""

import csv
import io
from typing import Iterable, Iterator, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from leadhub.app.db.gateway import Gateway
from leadhub.app.db.query import client_filters
from leadhub.app.db.session import get_gateway
from leadhub.app.dependencies.auth import Identity, require_session
from leadhub.app.schemas.client import ClientStatus
from leadhub.app.services.clients import CLIENT_SELECT, decode_tags

router = APIRouter(prefix="/export", tags=["export"])

CSV_HEADERS = [
    "ID",
    "Full Name",
    "Email",
    "Phone",
    "Status",
    "Source",
    "Tags",
    "Business",
    "Created At",
    "Updated At",
]


def _csv_line(values: list) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(values)
    return buffer.getvalue()


def iter_client_csv(rows: Iterable[dict]) -> Iterator[str]:
    yield _csv_line(CSV_HEADERS)
    for row in rows:
        yield _csv_line(
            [
                row["id"],
                row["full_name"] or "",
                row["email"] or "",
                row["phone"] or "",
                row["status"],
                row["source"],
                "; ".join(decode_tags(row["tags"])),
                row.get("business_name") or "",
                row["created_at"],
                row["updated_at"],
            ]
        )


@router.get("/clients.csv")
async def export_clients_csv(
    search: Optional[str] = None,
    status: Optional[ClientStatus] = None,
    source: Optional[str] = None,
    tag: Optional[str] = None,
    business_id: Optional[int] = None,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    filters = client_filters(
        "c", search=search, status=status, source=source, tag=tag, business_id=business_id
    )
    # Query before streaming so storage failures still come back as a JSON error
    rows = gateway.exec_rows(
        f"{CLIENT_SELECT} WHERE {filters.where_clause()} ORDER BY c.created_at DESC, c.id DESC",
        filters.params,
    )
    return StreamingResponse(
        iter_client_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=clients.csv"},
    )
