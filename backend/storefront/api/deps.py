from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.adapters.mock_payment import MockPaymentAdapter
from storefront.adapters.stripe_payment import StripePaymentAdapter
from storefront.config import settings
from storefront.db import get_db
from storefront.exceptions import NotFound, Unauthenticated
from storefront.schemas.checkout_schema import OrderDraft
from storefront.services.cart_service import CartService
from storefront.services.identity_service import IdentityService

DRAFT_KEY = "order_draft"


def get_authenticated_name(request: Request) -> Optional[str]:
    """Account name forwarded by the upstream authenticator, None for anonymous visitors."""
    name = request.headers.get(settings.AUTH_USER_HEADER)
    return name.strip() if name and name.strip() else None


def get_owner(
    request: Request, user: Optional[str] = Depends(get_authenticated_name)
) -> str:
    return IdentityService().resolve_owner(request.session, user)


def require_account(
    request: Request,
    user: Optional[str] = Depends(get_authenticated_name),
    db: Session = Depends(get_db),
) -> str:
    """
    Checkout and payment need a signed-in visitor. On the first such request
    after login the anonymous cart is merged into the account's cart.
    """
    if not user:
        raise Unauthenticated("Please log in to check out")
    IdentityService(CartService(db)).sync_owner_on_login(request.session, user)
    return user


@lru_cache()
def get_payment_adapter():
    if settings.PAYMENT_GATEWAY == "stripe":
        return StripePaymentAdapter(
            secret_key=settings.STRIPE_SECRET_KEY,
            currency=settings.PAYMENT_CURRENCY,
            timeout_seconds=settings.PAYMENT_TIMEOUT_SECONDS,
        )
    return MockPaymentAdapter(
        delay_ms=settings.PAYMENT_MOCK_DELAY_MS,
        failure_rate=settings.PAYMENT_MOCK_FAILURE_RATE,
        currency=settings.PAYMENT_CURRENCY,
    )


def store_draft(request: Request, draft: OrderDraft) -> None:
    request.session[DRAFT_KEY] = draft.model_dump(mode="json")


def clear_draft(request: Request) -> None:
    request.session.pop(DRAFT_KEY, None)


def get_order_draft(request: Request) -> OrderDraft:
    raw = request.session.get(DRAFT_KEY)
    if not raw:
        raise NotFound("No order awaiting payment, please check out first")
    try:
        return OrderDraft.model_validate(raw)
    except ValidationError as e:
        clear_draft(request)
        raise NotFound("Saved order could not be read, please check out again") from e
