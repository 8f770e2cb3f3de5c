# fleet_portal/routers/parts_orders.py
"""Technical and body parts orders."""

from typing import Optional

from fastapi import APIRouter, Depends

from fleet_portal.routers.deps import get_actor, parts_order_repo
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.parts_order import PartsOrderCreate, PartsOrderOut, PartsOrderUpdate
from fleet_portal.services.repository import Repository

router = APIRouter()


@router.get("/parts-orders", response_model=list[PartsOrderOut], summary="List parts orders")
def list_parts_orders(order_type: Optional[str] = None, status: Optional[str] = None,
                      actor: Optional[Actor] = Depends(get_actor),
                      orders: Repository = Depends(parts_order_repo)):
    result = orders.visible(actor)
    if order_type:
        result = [o for o in result if o.order_type == order_type]
    if status:
        result = [o for o in result if o.status == status]
    return result


@router.post("/parts-orders", response_model=PartsOrderOut, status_code=201, summary="Place a parts order")
def create_parts_order(body: PartsOrderCreate, actor: Optional[Actor] = Depends(get_actor),
                       orders: Repository = Depends(parts_order_repo)):
    return orders.create(actor, body.model_dump())


@router.patch("/parts-orders/{order_id}", response_model=PartsOrderOut, summary="Update a parts order")
def update_parts_order(order_id: int, body: PartsOrderUpdate, actor: Optional[Actor] = Depends(get_actor),
                       orders: Repository = Depends(parts_order_repo)):
    fields = body.model_dump(exclude_unset=True)
    if "total_cost" not in fields and ("quantity" in fields or "part_cost" in fields):
        current = orders.find(actor, order_id)
        fields["total_cost"] = round(fields.get("quantity", current.quantity)
                                     * fields.get("part_cost", current.part_cost), 2)
    return orders.update(actor, order_id, fields)


@router.delete("/parts-orders/{order_id}", summary="Remove a parts order")
def delete_parts_order(order_id: int, actor: Optional[Actor] = Depends(get_actor),
                       orders: Repository = Depends(parts_order_repo)):
    orders.delete(actor, order_id)
    return {"status": "removed", "id": order_id}
