from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from storefront.api.deps import (
    clear_draft,
    get_order_draft,
    get_payment_adapter,
    require_account,
    store_draft,
)
from storefront.config import settings
from storefront.db import get_db
from storefront.schemas.cart_schema import CartLineOut
from storefront.schemas.checkout_schema import OrderDraft, PaymentIn, Recipient
from storefront.services.cart_service import CartService, cart_total
from storefront.services.checkout_service import CheckoutService
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.get("", summary="Start checkout")
def start_checkout(owner: str = Depends(require_account), db: Session = Depends(get_db)):
    # require_account has already merged any anonymous cart into this account
    lines = CartService(db).list_by_owner(owner)
    return {
        "owner": owner,
        "items": [CartLineOut.model_validate(it).model_dump() for it in lines],
        "total_cents": cart_total(lines),
    }


@router.post("", summary="Submit recipient details and price the order")
def submit_checkout(
    payload: Recipient,
    request: Request,
    owner: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    draft = CheckoutService(db).build_draft(owner, payload)
    store_draft(request, draft)
    return draft.model_dump(mode="json")


@router.get("/payment", summary="Payment page data")
def view_payment(
    owner: str = Depends(require_account),
    draft: OrderDraft = Depends(get_order_draft),
    db: Session = Depends(get_db),
):
    svc = CheckoutService(db, publishable_key=settings.STRIPE_PUBLISHABLE_KEY)
    return svc.payment_summary(owner, draft)


@router.post("/payment", summary="Pay for the pending order")
def submit_payment(
    payload: PaymentIn,
    request: Request,
    owner: str = Depends(require_account),
    draft: OrderDraft = Depends(get_order_draft),
    db: Session = Depends(get_db),
    payment_adapter=Depends(get_payment_adapter),
):
    svc = PaymentService(db, payment_adapter, description=settings.PAYMENT_DESCRIPTION)
    # on a decline or outage the draft stays in the session for a retry
    order_id = svc.capture_payment(owner, draft, payload.stripe_token, payload.stripe_email)
    clear_draft(request)
    return {"order_id": order_id}
