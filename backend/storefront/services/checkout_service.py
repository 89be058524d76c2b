from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Union
from uuid import uuid4

from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.exceptions import EmptyCart, InvalidArgument
from storefront.repositories.cart_repo import CartRepository
from storefront.schemas.checkout_schema import OrderDraft, Recipient
from storefront.services.cart_service import cart_total
from storefront.utils.logging import get_logger

log = get_logger("checkout")


class CheckoutService:
    def __init__(self, db: Session, publishable_key: Optional[str] = None):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.publishable_key = publishable_key

    def _gen_draft_id(self) -> str:
        return f"DRF-{uuid4().hex.upper()}"

    def build_draft(
        self, owner: str, recipient: Union[Recipient, Mapping]
    ) -> OrderDraft:
        """
        Price the owner's cart as it stands now and return an unpaid draft.

        The caller keeps the draft (in the session) and hands it back at
        payment time; whatever total is computed here is what gets charged.
        """
        if not isinstance(recipient, Recipient):
            try:
                recipient = Recipient.model_validate(recipient)
            except ValidationError as e:
                raise InvalidArgument(f"Invalid recipient details: {e}") from e

        lines = self.cart_repo.list_by_owner(owner)
        if not lines:
            raise EmptyCart("Cannot check out an empty cart")

        draft = OrderDraft(
            **recipient.model_dump(),
            draft_id=self._gen_draft_id(),
            owner=owner,
            total_cents=cart_total(lines),
            line_count=len(lines),
            created_at=datetime.now(timezone.utc),
        )
        log.info(
            "draft %s owner=%s lines=%d total_cents=%d",
            draft.draft_id, owner, draft.line_count, draft.total_cents,
        )
        return draft

    def payment_summary(self, owner: str, draft: OrderDraft) -> Dict:
        """Data for the payment page: what will be charged and to whom."""
        if draft.owner != owner:
            raise InvalidArgument("Order draft does not belong to this cart")
        lines = self.cart_repo.list_by_owner(owner)
        return {
            "draft_id": draft.draft_id,
            "total_cents": draft.total_cents,
            "name": f"{draft.first_name} {draft.last_name}",
            "address": f"{draft.address}, {draft.city}, {draft.province} {draft.postal_code}",
            "phone": draft.phone,
            "publishable_key": self.publishable_key,
            "items": [
                {
                    "id": it.id,
                    "product_id": it.product_id,
                    "name": it.product.name,
                    "quantity": it.quantity,
                    "price_cents": it.price_cents,
                }
                for it in lines
            ],
        }
