"""Business endpoints."""

from fastapi import APIRouter, Depends, status

from leadhub.app.core.errors import ConflictError, NotFoundError
from leadhub.app.core.time import timestamp
from leadhub.app.db.gateway import Gateway
from leadhub.app.db.query import UpdateBuilder
from leadhub.app.db.session import get_gateway
from leadhub.app.dependencies.auth import Identity, require_session
from leadhub.app.schemas.business import BusinessCreate, BusinessRead, BusinessUpdate

router = APIRouter(prefix="/businesses", tags=["businesses"])

BUSINESS_COLUMNS = (
    "name",
    "email",
    "phone",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
    "tax_id",
    "website",
)


def _get_business(gateway: Gateway, business_id: int) -> dict:
    business = gateway.exec_one("SELECT * FROM businesses WHERE id = :id", {"id": business_id})
    if not business:
        raise NotFoundError("Business not found")
    return business


@router.get("", response_model=list[BusinessRead])
async def list_businesses(gateway: Gateway = Depends(get_gateway), identity: Identity = Depends(require_session)):
    return gateway.exec_rows("SELECT * FROM businesses ORDER BY created_at DESC, id DESC")


@router.get("/{business_id}", response_model=BusinessRead)
async def read_business(
    business_id: int,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    return _get_business(gateway, business_id)


@router.post("", response_model=BusinessRead, status_code=status.HTTP_201_CREATED)
async def create_business(
    business_in: BusinessCreate,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    values = business_in.model_dump(mode="json")
    now = timestamp()
    columns = ", ".join(BUSINESS_COLUMNS)
    placeholders = ", ".join(f":{column}" for column in BUSINESS_COLUMNS)
    result = gateway.exec_write(
        f"INSERT INTO businesses ({columns}, created_at, updated_at) VALUES ({placeholders}, :now, :now)",
        {**{column: values.get(column) for column in BUSINESS_COLUMNS}, "now": now},
    )
    return _get_business(gateway, result.inserted_id)


@router.put("/{business_id}", response_model=BusinessRead)
async def update_business(
    business_id: int,
    business_in: BusinessUpdate,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    _get_business(gateway, business_id)
    changes = business_in.model_dump(mode="json", exclude_unset=True)
    sql, params = UpdateBuilder("businesses", BUSINESS_COLUMNS).set_many(changes).build(business_id)
    gateway.exec_write(sql, params)
    return _get_business(gateway, business_id)


@router.delete("/{business_id}")
async def delete_business(
    business_id: int,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    with gateway.transaction():
        assigned = gateway.exec_one(
            "SELECT COUNT(*) AS count FROM clients WHERE business_id = :id", {"id": business_id}
        )
        if assigned["count"] > 0:
            raise ConflictError("Cannot delete business with assigned clients. Please reassign clients first.")
        # Accounts may still point at this business as their default
        gateway.exec_write(
            "UPDATE accounts SET default_business_id = NULL WHERE default_business_id = :id", {"id": business_id}
        )
        result = gateway.exec_write("DELETE FROM businesses WHERE id = :id", {"id": business_id})
        if result.affected_count == 0:
            raise NotFoundError("Business not found")
    return {"message": "Business deleted successfully", "id": business_id}
