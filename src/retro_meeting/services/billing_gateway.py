"""
Billing Gateway - interface to the per-seat subscription provider
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
import logging

import stripe

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from a Stripe object or a plain dict"""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class BillingGateway(ABC):
    """Abstract base class for the billing provider"""

    @abstractmethod
    def create_customer(self, email: str, org_id: str, source: Optional[str] = None) -> Dict[str, Any]:
        """Create a customer for an organization"""
        pass

    @abstractmethod
    def create_subscription(self, customer_id: str, plan_id: str, quantity: int,
                            trial_period_days: int, metadata: Optional[Dict] = None) -> Dict[str, Any]:
        """Create a per-seat subscription"""
        pass

    @abstractmethod
    def retrieve_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """Return the subscription's current period (epoch seconds) and quantity"""
        pass

    @abstractmethod
    def update_subscription_quantity(self, subscription_id: str, quantity: int,
                                     proration_date: int) -> Dict[str, Any]:
        """Change the number of billed seats, prorated from ``proration_date``"""
        pass

    @abstractmethod
    def update_customer_source(self, customer_id: str, source: str) -> Dict[str, Any]:
        """Attach a new default payment source to a customer"""
        pass

    @abstractmethod
    def update_invoice_item(self, invoice_item_id: str, metadata: Dict[str, str]) -> Dict[str, Any]:
        """Tag an invoice item with metadata"""
        pass

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """Verify a webhook payload and return the parsed event"""
        pass

    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        """True if the payload was signed by the provider"""
        try:
            self.construct_event(payload, signature)
        except ValueError:
            return False
        return True


class StripeGateway(BillingGateway):
    """Stripe payment gateway"""

    def __init__(self, api_key: Optional[str], webhook_secret: Optional[str]):
        """
        Initialize Stripe gateway

        Args:
            api_key: Stripe secret API key
            webhook_secret: Stripe webhook signing secret
        """
        self.stripe = stripe
        self.stripe.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_customer(self, email: str, org_id: str, source: Optional[str] = None) -> Dict[str, Any]:
        """Create a Stripe customer"""
        params = {"email": email, "metadata": {"orgId": org_id}}
        if source:
            params["source"] = source
        try:
            customer = self.stripe.Customer.create(**params)
        except Exception as e:
            logger.error(f"Stripe customer creation failed for org {org_id}: {e}")
            raise
        return {"customer_id": _field(customer, "id")}

    def create_subscription(self, customer_id: str, plan_id: str, quantity: int,
                            trial_period_days: int, metadata: Optional[Dict] = None) -> Dict[str, Any]:
        """Create a Stripe subscription"""
        try:
            subscription = self.stripe.Subscription.create(
                customer=customer_id,
                items=[{"price": plan_id, "quantity": quantity}],
                trial_period_days=trial_period_days,
                metadata=metadata or {},
            )
        except Exception as e:
            logger.error(f"Stripe subscription creation failed for customer {customer_id}: {e}")
            raise
        return self._subscription_period(subscription)

    def retrieve_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """Retrieve a Stripe subscription"""
        try:
            subscription = self.stripe.Subscription.retrieve(subscription_id)
        except Exception as e:
            logger.error(f"Stripe subscription retrieval failed for {subscription_id}: {e}")
            raise
        return self._subscription_period(subscription)

    def update_subscription_quantity(self, subscription_id: str, quantity: int,
                                     proration_date: int) -> Dict[str, Any]:
        """Change the seat count of a Stripe subscription"""
        try:
            subscription = self.stripe.Subscription.modify(
                subscription_id,
                quantity=quantity,
                proration_date=proration_date,
            )
        except Exception as e:
            logger.error(f"Stripe quantity update failed for {subscription_id}: {e}")
            raise
        return self._subscription_period(subscription)

    def update_customer_source(self, customer_id: str, source: str) -> Dict[str, Any]:
        """Set the default payment source of a Stripe customer"""
        try:
            customer = self.stripe.Customer.modify(customer_id, source=source)
        except Exception as e:
            logger.error(f"Stripe source update failed for customer {customer_id}: {e}")
            raise
        return {"customer_id": _field(customer, "id")}

    def update_invoice_item(self, invoice_item_id: str, metadata: Dict[str, str]) -> Dict[str, Any]:
        """Tag a Stripe invoice item"""
        try:
            item = self.stripe.InvoiceItem.modify(invoice_item_id, metadata=metadata)
        except Exception as e:
            logger.error(f"Stripe invoice item update failed for {invoice_item_id}: {e}")
            raise
        return {"invoice_item_id": _field(item, "id"), "metadata": metadata}

    def construct_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """
        Verify a Stripe webhook

        Raises:
            ValueError: If the payload or signature is invalid
        """
        if not self.webhook_secret:
            raise ValueError("Stripe webhook secret not configured")
        try:
            event = self.stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            raise ValueError(f"Invalid Stripe signature: {e}")
        return event.to_dict() if hasattr(event, "to_dict") else dict(event)

    @staticmethod
    def _subscription_period(subscription: Any) -> Dict[str, Any]:
        """
        Normalize a subscription into its id, quantity and current period

        Newer Stripe API versions report the period on the subscription items
        rather than on the subscription itself.
        """
        start = _field(subscription, "current_period_start")
        end = _field(subscription, "current_period_end")
        quantity = _field(subscription, "quantity")
        items = _field(_field(subscription, "items", None) or {}, "data", None) or []
        if items:
            first_item = items[0]
            start = start or _field(first_item, "current_period_start")
            end = end or _field(first_item, "current_period_end")
            quantity = quantity or _field(first_item, "quantity")
        return {
            "subscription_id": _field(subscription, "id"),
            "status": _field(subscription, "status"),
            "quantity": quantity,
            "current_period_start": start,
            "current_period_end": end,
        }


def get_billing_gateway(config) -> BillingGateway:
    """
    Factory function to get the billing gateway

    Args:
        config: Config object with payment provider settings

    Returns:
        BillingGateway instance
    """
    if not config.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY not configured; billing calls will fail")
    return StripeGateway(config.STRIPE_SECRET_KEY, config.STRIPE_WEBHOOK_SECRET)
