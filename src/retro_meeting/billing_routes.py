"""
Billing API routes - Stripe webhooks
"""
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from .db import get_db
from .dependencies import get_gateway
from .services.billing_gateway import BillingGateway
from .services.invoice_item_hooks import handle_invoice_item_created

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/billing", tags=["billing"])


@router.post("/webhooks/stripe")
async def stripe_webhook(
    request: Request,
    db: Session = Depends(get_db),
    gateway: BillingGateway = Depends(get_gateway),
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
):
    """
    Receive Stripe events

    Only ``invoiceitem.created`` is acted on; every other verified event is
    acknowledged so Stripe stops retrying it.
    """
    if not stripe_signature:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing Stripe-Signature header"
        )

    payload = await request.body()
    try:
        event = gateway.construct_event(payload, stripe_signature)
    except ValueError as e:
        logger.warning(f"Rejected Stripe webhook: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid webhook signature"
        )

    event_type = event.get("type", "")
    logger.info(f"Stripe webhook received: {event_type} ({event.get('id', '')})")

    if event_type == "invoiceitem.created":
        invoice_item = (event.get("data") or {}).get("object") or {}
        hook = handle_invoice_item_created(db, gateway, invoice_item)
        return {"received": True, "matched": hook is not None}

    return {"received": True, "ignored": event_type}
