from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_account
from storefront.db import get_db
from storefront.exceptions import NotFound
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.checkout_schema import OrderOut

router = APIRouter(tags=["orders"])


@router.get("/{order_id}", summary="Order confirmation")
def get_order(order_id: int, owner: str = Depends(require_account), db: Session = Depends(get_db)):
    order = OrderRepository(db).get_for_owner(order_id, owner)
    if not order:
        raise NotFound("Order not found")
    return OrderOut.model_validate(order).model_dump(mode="json")
