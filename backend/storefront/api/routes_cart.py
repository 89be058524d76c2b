from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from storefront.api.deps import get_owner
from storefront.db import get_db
from storefront.schemas.cart_schema import CartLineOut, CartOut
from storefront.services.cart_service import CartService, cart_total

router = APIRouter(prefix="/api/cart", tags=["cart"])


class AddItemIn(BaseModel):
    product_id: int
    quantity: int = 1


@router.get("", summary="Get cart")
def get_cart(owner: str = Depends(get_owner), db: Session = Depends(get_db)):
    svc = CartService(db)
    lines = svc.list_by_owner(owner)
    return CartOut(
        owner=owner,
        items=[CartLineOut.model_validate(it) for it in lines],
        total_cents=cart_total(lines),
    ).model_dump()


@router.post("/items", summary="Add item to cart")
def add_item(
    payload: AddItemIn,
    owner: str = Depends(get_owner),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    line = svc.add_or_increment(owner, payload.product_id, payload.quantity)
    return {"line_id": line.id, "quantity": line.quantity, "owner": owner}


@router.delete("/items/{line_id}", summary="Remove item")
def remove_item(
    line_id: int, owner: str = Depends(get_owner), db: Session = Depends(get_db)
):
    svc = CartService(db)
    removed = svc.remove(line_id, owner=owner)
    return {"ok": True, "removed": removed}
