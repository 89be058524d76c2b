from sqlalchemy.orm import Session

from storefront.exceptions import EmptyCart, InvalidArgument, PersistenceFailure
from storefront.models.order import Order, OrderDetail
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.checkout_schema import OrderDraft
from storefront.services.cart_service import cart_total
from storefront.utils.logging import get_logger
from storefront.utils.transactions import unit_of_work

log = get_logger("payment")


class PaymentService:
    def __init__(self, db: Session, payment_adapter, description: str = "Storefront Purchase"):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.order_repo = OrderRepository(db)
        self.payment_adapter = payment_adapter
        self.description = description

    def capture_payment(
        self, owner: str, draft: OrderDraft, gateway_token: str, gateway_email: str
    ) -> int:
        """
        Charge the draft's total and turn the owner's cart into an order.

        Steps:
          1. re-read the cart (the order details come from this read)
          2. charge the gateway; nothing local has been written yet, so a
             decline or outage leaves the cart and draft ready for a retry
          3. insert Order + OrderDetails and empty the cart in one transaction

        The draft id doubles as the gateway idempotency key and is unique on
        the order, so replaying the same draft returns the recorded order and
        a replay after a failed commit reuses the original charge. A second
        submit racing this one may record the order first; its order is
        returned when the charge ids match.
        Returns the order id.
        """
        if draft.owner != owner:
            raise InvalidArgument("Order draft does not belong to this cart")

        existing = self.order_repo.get_by_draft_id(draft.draft_id)
        if existing:
            log.info("draft %s already recorded as order %s", draft.draft_id, existing.id)
            return existing.id

        # 1) fresh cart snapshot
        lines = self.cart_repo.list_by_owner(owner)
        if not lines:
            raise EmptyCart("Cart is empty, nothing to pay for")
        current_total = cart_total(lines)
        if current_total != draft.total_cents:
            log.warning(
                "cart changed since checkout for draft %s: draft total=%d, cart total=%d; charging draft total",
                draft.draft_id, draft.total_cents, current_total,
            )
        snapshot = [(it.product_id, it.quantity, it.price_cents) for it in lines]
        # don't hold a read transaction open across the gateway call
        self.db.commit()

        # 2) charge; PaymentDeclined / GatewayUnavailable propagate untouched
        try:
            payment_tx = self.payment_adapter.charge(
                amount_cents=draft.total_cents,
                email=gateway_email,
                token=gateway_token,
                description=self.description,
                idempotency_key=draft.draft_id,
            )
        except Exception as e:
            log.warning("payment for draft %s failed: %s: %s", draft.draft_id, type(e).__name__, e)
            raise
        log.info(
            "charged %d cents for draft %s (charge=%s)",
            draft.total_cents, draft.draft_id, payment_tx["charge_id"],
        )

        # 3) order + details + cart clear, all or nothing
        try:
            with unit_of_work(self.db):
                order = Order(
                    user_id=owner,
                    first_name=draft.first_name,
                    last_name=draft.last_name,
                    address=draft.address,
                    city=draft.city,
                    province=draft.province,
                    postal_code=draft.postal_code,
                    phone=draft.phone,
                    total_cents=draft.total_cents,
                    order_date=draft.created_at,
                    draft_id=draft.draft_id,
                    charge_id=payment_tx["charge_id"],
                )
                self.db.add(order)
                self.db.flush()
                for product_id, qty, price_cents in snapshot:
                    self.db.add(
                        OrderDetail(
                            order_id=order.id,
                            product_id=product_id,
                            quantity=qty,
                            price_cents=price_cents,
                        )
                    )
                self.cart_repo.delete_by_owner(owner)
                self.db.flush()
                order_id = order.id
        except PersistenceFailure:
            # a concurrent submit of the same draft may have recorded it first
            existing = self.order_repo.get_by_draft_id(draft.draft_id)
            if existing is not None and existing.charge_id == payment_tx["charge_id"]:
                log.info("draft %s recorded concurrently as order %s", draft.draft_id, existing.id)
                return existing.id
            # the card has been charged but nothing was recorded
            log.error(
                "RECONCILE: charge %s for draft %s (owner=%s, %d cents) was not recorded",
                payment_tx["charge_id"], draft.draft_id, owner, draft.total_cents,
            )
            raise

        log.info("order %s created for owner=%s draft=%s", order_id, owner, draft.draft_id)
        return order_id
