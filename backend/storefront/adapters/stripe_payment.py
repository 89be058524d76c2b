from typing import Dict, Optional

import stripe

from storefront.exceptions import GatewayUnavailable, PaymentDeclined
from storefront.utils.logging import get_logger

log = get_logger("payment.stripe")

# errors caused by the card or the request, not by the gateway being down
_DECLINED_ERRORS = (stripe.CardError, stripe.InvalidRequestError)


def classify_stripe_error(e: stripe.StripeError) -> Exception:
    """Map a Stripe exception onto PaymentDeclined or GatewayUnavailable."""
    msg = getattr(e, "user_message", None) or str(e) or type(e).__name__
    if isinstance(e, _DECLINED_ERRORS):
        return PaymentDeclined(msg)
    return GatewayUnavailable(msg)


class StripePaymentAdapter:
    """
    Charges cards through Stripe: one Customer per payment (built from the
    card token and email) and one Charge against that customer.

    Requests time out after `timeout_seconds` and are never retried
    automatically; callers pass an idempotency key so a manual retry of the
    same checkout can't charge twice.
    """

    def __init__(
        self,
        secret_key: str,
        currency: str = "cad",
        timeout_seconds: float = 10.0,
    ):
        self.secret_key = secret_key
        self.currency = currency
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout_seconds)
        stripe.max_network_retries = 0

    @staticmethod
    def _idempotency(key: Optional[str], step: str) -> Dict:
        # customer and charge are separate requests, each needs its own key
        return {"idempotency_key": f"{key}-{step}"} if key else {}

    def charge(
        self,
        amount_cents: int,
        email: str,
        token: str,
        description: str = "",
        idempotency_key: Optional[str] = None,
    ) -> Dict:
        try:
            customer = stripe.Customer.create(
                email=email,
                source=token,
                api_key=self.secret_key,
                **self._idempotency(idempotency_key, "customer"),
            )
            charge = stripe.Charge.create(
                amount=amount_cents,
                currency=self.currency,
                description=description,
                customer=customer.id,
                api_key=self.secret_key,
                **self._idempotency(idempotency_key, "charge"),
            )
        except stripe.StripeError as e:
            log.warning("stripe error %s: %s", type(e).__name__, e)
            raise classify_stripe_error(e) from e

        return {
            "charge_id": charge.id,
            "customer_id": customer.id,
            "amount_cents": amount_cents,
            "currency": self.currency,
            "status": charge.status,
        }

    def health_check(self) -> bool:
        return bool(self.secret_key)
