# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Payment endpoints – Stripe PaymentIntent creation and the webhook receiver.

``/webhook`` is deliberately outside the route guards: Stripe calls it, not
a browser.  Its only credential is the ``Stripe-Signature`` header, checked
against the endpoint secret before anything else happens.  A bad signature
gets a 400 and the event is dropped.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
import stripe

from database import get_db
from auth.guards import require_auth
from auth.strategies import Identity
from core.context import AppContext, get_context
from core.logger import logger
from models.order import Order
from payments.schemas import PaymentIntentRequest, PaymentIntentResponse

router = APIRouter(tags=["payments"])

PAYMENT_SUCCEEDED = "payment_intent.succeeded"


# ---------------------------------------------------------------------------
# POST /create-payment-intent
# ---------------------------------------------------------------------------


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    body: PaymentIntentRequest,
    identity: Identity = Depends(require_auth),
    ctx: AppContext = Depends(get_context),
):
    """Create a PaymentIntent for the order total; the browser completes it."""
    logger.info("Payment intent for order id=%d total=%s", body.order_id, body.total_amount)
    client_secret = ctx.payments.create_payment_intent(body.total_amount, body.order_id)
    return PaymentIntentResponse(client_secret=client_secret)


# ---------------------------------------------------------------------------
# POST /webhook
# ---------------------------------------------------------------------------


def _mark_order_paid(intent, db: Session) -> None:
    metadata = getattr(intent, "metadata", None)
    order_ref = getattr(metadata, "order_id", None) if metadata is not None else None
    if not order_ref or not str(order_ref).isdigit():
        logger.warning("Payment %s carries no order reference", getattr(intent, "id", "?"))
        return

    order = db.query(Order).filter(Order.id == int(order_ref)).first()
    if not order:
        logger.warning("Payment %s references unknown order id=%s", getattr(intent, "id", "?"), order_ref)
        return

    order.payment_status = "received"
    db.commit()
    logger.info("Order id=%d payment received", order.id)


@router.post("/webhook")
async def webhook(
    request: Request,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    payload = await request.body()
    signature = request.headers.get("stripe-signature", "")

    try:
        event = ctx.payments.construct_event(payload, signature)
    except (ValueError, stripe.SignatureVerificationError) as exc:
        logger.warning("Rejected webhook: %s", exc)
        return PlainTextResponse(f"Webhook Error: {exc}", status_code=status.HTTP_400_BAD_REQUEST)

    if event.type == PAYMENT_SUCCEEDED:
        await run_in_threadpool(_mark_order_paid, event.data.object, db)
    else:
        logger.info("Unhandled event type %s", event.type)

    return Response(status_code=status.HTTP_200_OK)
