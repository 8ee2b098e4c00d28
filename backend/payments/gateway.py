# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Thin wrapper around the Stripe SDK.

The API key is passed per call instead of being assigned to the global
``stripe.api_key``, so two application contexts in one process (tests, for
instance) cannot leak keys into each other.
"""

from decimal import Decimal, ROUND_HALF_UP

import stripe


def to_minor_units(amount: Decimal) -> int:
    """Scale a currency amount to the processor's integer minor unit (x100)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway:
    def __init__(self, api_key: str, endpoint_secret: str, currency: str = "inr"):
        self._api_key = api_key
        self._endpoint_secret = endpoint_secret
        self.currency = currency

    def create_payment_intent(self, total_amount: Decimal, order_id) -> str:
        """Create a PaymentIntent for *total_amount* and return its client secret."""
        intent = stripe.PaymentIntent.create(
            api_key=self._api_key,
            amount=to_minor_units(total_amount),
            currency=self.currency,
            automatic_payment_methods={"enabled": True},
            metadata={"order_id": str(order_id)},
        )
        return intent.client_secret

    def construct_event(self, payload: bytes, signature: str):
        """
        Verify *payload* against the ``Stripe-Signature`` header.

        Raises ``ValueError`` for an unparsable payload and
        ``stripe.SignatureVerificationError`` for a bad signature.
        """
        return stripe.Webhook.construct_event(payload, signature, self._endpoint_secret)
