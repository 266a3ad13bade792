"""
Matching Stripe invoice items back to the seat change that caused them
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..db.models import InvoiceItemHook
from .billing_gateway import BillingGateway

logger = logging.getLogger(__name__)


def handle_invoice_item_created(db: Session, gateway: BillingGateway,
                                invoice_item: Dict[str, Any]) -> Optional[InvoiceItemHook]:
    """
    Tag a prorated invoice item with the user and change type it bills for

    Stripe stamps the item's period start with the proration date we sent, so
    (period start, subscription) finds the hook. Hooks written in the same
    second are consumed oldest first. Redelivered events reuse the hook they
    matched the first time.

    Returns:
        The matched hook, or None if the item wasn't caused by a seat change
    """
    invoice_item_id = invoice_item.get("id")
    subscription_id = invoice_item.get("subscription")
    proration_date = (invoice_item.get("period") or {}).get("start")
    if not invoice_item_id or not subscription_id or proration_date is None:
        logger.info(f"Invoice item {invoice_item_id} is not a subscription proration; ignoring")
        return None

    hook = db.query(InvoiceItemHook).filter(InvoiceItemHook.invoice_item_id == invoice_item_id).first()
    if hook is None:
        hook = db.query(InvoiceItemHook).filter(
            InvoiceItemHook.proration_date == proration_date,
            InvoiceItemHook.stripe_subscription_id == subscription_id,
            InvoiceItemHook.invoice_item_id.is_(None),
        ).order_by(InvoiceItemHook.created_at, InvoiceItemHook.id).first()
    if hook is None:
        logger.warning(
            f"No invoice item hook for subscription {subscription_id} at {proration_date} "
            f"(invoice item {invoice_item_id})"
        )
        return None

    gateway.update_invoice_item(invoice_item_id, {"type": hook.type, "userId": hook.user_id})
    hook.invoice_item_id = invoice_item_id
    db.commit()
    logger.info(f"Invoice item {invoice_item_id} tagged as {hook.type} for user {hook.user_id}")
    return hook
