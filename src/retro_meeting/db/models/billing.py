"""
Invoice item hook model

A hook is written every time a seat change is pushed to Stripe. The Stripe
webhook for the resulting invoice item looks the hook up by proration date
and subscription to learn which user and which change it was for.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from datetime import datetime
import enum

from ..base import Base, generate_id


class InvoiceItemType(str, enum.Enum):
    """Seat change recorded against a subscription"""
    ADD_USER = "ADD_USER"
    AUTO_PAUSE_USER = "AUTO_PAUSE_USER"
    PAUSE_USER = "PAUSE_USER"
    REMOVE_USER = "REMOVE_USER"
    UNPAUSE_USER = "UNPAUSE_USER"


class InvoiceItemHook(Base):
    """Record of a seat change awaiting its Stripe invoice item"""
    __tablename__ = "invoice_item_hooks"

    id = Column(String, primary_key=True, default=generate_id)
    org_id = Column(String, ForeignKey("organizations.id"), nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False)
    proration_date = Column(Integer, nullable=False)  # epoch seconds
    stripe_subscription_id = Column(String, nullable=False, index=True)
    invoice_item_id = Column(String, nullable=True, unique=True)  # set once the webhook matches it
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_invoice_item_hooks_proration_date_org_id", "proration_date", "org_id"),
    )
