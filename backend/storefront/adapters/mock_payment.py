import time
import random
from uuid import uuid4
from typing import Dict, List, Optional

from storefront.exceptions import GatewayUnavailable, PaymentDeclined

# Tokens with a fixed outcome, named after the gateway's test tokens
DECLINE_TOKENS = {"tok_chargeDeclined", "tok_declined"}
UNAVAILABLE_TOKENS = {"tok_timeout"}


class MockPaymentAdapter:
    """
    In-memory stand-in for the card gateway, used in development and tests.

    Charges made with the same idempotency key return the first result
    instead of charging again, like the real gateway does.
    """

    def __init__(self, delay_ms: int = 200, failure_rate: float = 0.0, currency: str = "cad"):
        # Convert delay from milliseconds to seconds for time.sleep
        self.delay_seconds = delay_ms / 1000.0
        self.failure_rate = failure_rate
        self.currency = currency
        self.charges: List[Dict] = []
        self._by_key: Dict[str, Dict] = {}

    def charge(
        self,
        amount_cents: int,
        email: str,
        token: str,
        description: str = "",
        idempotency_key: Optional[str] = None,
    ) -> Dict:
        """
        Simulates creating a customer and charging it.

        Returns:
            {"charge_id", "customer_id", "amount_cents", "currency", "status"}

        Raises:
            PaymentDeclined: for the decline test tokens.
            GatewayUnavailable: for the timeout token or a simulated outage.
        """
        if idempotency_key and idempotency_key in self._by_key:
            return self._by_key[idempotency_key]

        # Simulate network latency / gateway processing
        time.sleep(self.delay_seconds)

        if token in DECLINE_TOKENS:
            raise PaymentDeclined("Your card was declined.")
        if token in UNAVAILABLE_TOKENS or (
            self.failure_rate and random.random() < self.failure_rate
        ):
            raise GatewayUnavailable("Payment gateway timed out, please try again")

        txn = {
            "charge_id": f"ch_mock_{uuid4().hex}",
            "customer_id": f"cus_mock_{uuid4().hex[:14]}",
            "amount_cents": amount_cents,
            "currency": self.currency,
            "description": description,
            "email": email,
            "status": "succeeded",
        }
        self.charges.append(txn)
        if idempotency_key:
            self._by_key[idempotency_key] = txn
        return txn

    def health_check(self) -> bool:
        return True
