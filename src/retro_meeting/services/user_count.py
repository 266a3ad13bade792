"""
Seat accounting for organizations

Every membership change that affects billing goes through
``adjust_user_count``: it updates the user and the org counters, leaves an
InvoiceItemHook for the webhook to match, and pushes the new seat count to
the billing provider.
"""
import calendar
import logging
from datetime import datetime
from typing import Iterable, List, Union

from sqlalchemy import case, update
from sqlalchemy.orm import Session

from ..db.models import InvoiceItemHook, InvoiceItemType, Organization, OrganizationUser, OrgUserRole, User
from ..exceptions import NotFoundError
from .billing_gateway import BillingGateway

logger = logging.getLogger(__name__)

# Change to the active seat count per event type
ACTIVE_DELTA = {
    InvoiceItemType.ADD_USER: 1,
    InvoiceItemType.AUTO_PAUSE_USER: -1,
    InvoiceItemType.PAUSE_USER: -1,
    InvoiceItemType.REMOVE_USER: -1,
    InvoiceItemType.UNPAUSE_USER: 1,
}

# Change to the paused seat count per event type
INACTIVE_DELTA = {
    InvoiceItemType.ADD_USER: 0,
    InvoiceItemType.AUTO_PAUSE_USER: 1,
    InvoiceItemType.PAUSE_USER: 1,
    InvoiceItemType.REMOVE_USER: 0,
    InvoiceItemType.UNPAUSE_USER: -1,
}


def to_epoch_seconds(moment: datetime) -> int:
    return calendar.timegm(moment.utctimetuple())


def _clamped(column, delta: int):
    """SQL expression adding delta to a counter without going below zero"""
    return case((column + delta < 0, 0), else_=column + delta)


def _apply_user_change(db: Session, user: User, org_ids: List[str], item_type: InvoiceItemType, now: datetime):
    if item_type in (InvoiceItemType.PAUSE_USER, InvoiceItemType.AUTO_PAUSE_USER):
        user.inactive = True
    elif item_type == InvoiceItemType.UNPAUSE_USER:
        user.inactive = False
    elif item_type == InvoiceItemType.ADD_USER:
        existing = {membership.org_id for membership in user.org_memberships}
        for org_id in org_ids:
            if org_id not in existing:
                db.add(OrganizationUser(org_id=org_id, user_id=user.id, role=OrgUserRole.MEMBER.value))
    # REMOVE_USER: the caller already deleted the membership
    user.updated_at = now


def adjust_user_count(
    db: Session,
    gateway: BillingGateway,
    user_id: str,
    org_input: Union[str, Iterable[str]],
    item_type: InvoiceItemType,
    now: datetime = None,
) -> List[Organization]:
    """
    Apply a seat change for one user across one or more orgs

    Args:
        db: Database session
        gateway: Billing gateway used to push new quantities
        user_id: The user whose seat changed
        org_input: An org id or a list of org ids
        item_type: What happened to the seat
        now: Override the proration timestamp (tests)

    Returns:
        The updated organizations
    """
    org_ids = [org_input] if isinstance(org_input, str) else list(org_input)
    now = now or datetime.utcnow()
    proration_date = to_epoch_seconds(now)

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"{user_id} does not exist")

    # A removed user who was paused held a paused seat, not an active one
    removing_inactive = item_type == InvoiceItemType.REMOVE_USER and user.inactive
    active_delta = 0 if removing_inactive else ACTIVE_DELTA[item_type]
    inactive_delta = -1 if removing_inactive else INACTIVE_DELTA[item_type]

    _apply_user_change(db, user, org_ids, item_type, now)

    # The database applies the deltas so concurrent changes to one org don't overwrite each other
    db.execute(
        update(Organization)
        .where(Organization.id.in_(org_ids))
        .values(
            active_user_count=_clamped(Organization.active_user_count, active_delta),
            inactive_user_count=_clamped(Organization.inactive_user_count, inactive_delta),
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )

    billed = db.query(Organization.id, Organization.stripe_subscription_id).filter(
        Organization.id.in_(org_ids),
        Organization.stripe_subscription_id.isnot(None),
    ).all() if active_delta != 0 else []
    for org_id, subscription_id in billed:
        db.add(InvoiceItemHook(
            org_id=org_id,
            user_id=user_id,
            type=item_type.value,
            proration_date=proration_date,
            stripe_subscription_id=subscription_id,
        ))

    # Hooks must be visible before the provider fires its invoice item webhooks
    db.commit()

    orgs = db.query(Organization).filter(Organization.id.in_(org_ids)).populate_existing().all()

    for org in orgs:
        if not org.stripe_subscription_id or active_delta == 0:
            continue
        gateway.update_subscription_quantity(
            org.stripe_subscription_id,
            quantity=org.active_user_count,
            proration_date=proration_date,
        )
        logger.info(
            f"{item_type.value} for user {user_id}: org {org.id} now has "
            f"{org.active_user_count} active seats"
        )

    return orgs
