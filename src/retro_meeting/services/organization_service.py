"""
Organization Service - membership, billing leaders, pauses and org settings
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
import logging
import uuid

from sqlalchemy.orm import Session

from ..auth import AuthToken
from ..config import config
from ..db.models import (
    InvoiceItemHook,
    InvoiceItemType,
    Organization,
    OrganizationUser,
    OrgUserRole,
    Team,
    TeamMember,
    User,
    team_member_id,
)
from ..exceptions import BusinessRuleError, NotFoundError
from .authorization import (
    require_auth,
    require_org_leader,
    require_org_leader_of_user,
    require_websocket,
)
from .billing_gateway import BillingGateway
from .storage_provider import StorageProvider
from .user_count import adjust_user_count
from .validation import validate_avatar_upload, validate_new_org, validate_update_org

logger = logging.getLogger(__name__)


class OrganizationService:
    """Service behind the organization mutations"""

    def __init__(self, db: Session, gateway: BillingGateway, storage: Optional[StorageProvider] = None):
        """
        Initialize organization service

        Args:
            db: Database session
            gateway: Billing gateway
            storage: Storage provider for org pictures
        """
        self.db = db
        self.gateway = gateway
        self.storage = storage

    def _get_org(self, org_id: str) -> Organization:
        org = self.db.get(Organization, org_id)
        if org is None:
            raise NotFoundError(f"Organization {org_id} does not exist")
        return org

    def update_org(self, auth_token: Optional[AuthToken], updated_org: Dict[str, Any],
                   via_websocket: bool) -> bool:
        """Change the name and/or picture of an org"""
        # AUTH
        require_websocket(via_websocket)
        require_org_leader(self.db, auth_token, updated_org.get("id"))

        # VALIDATION
        data = validate_update_org(updated_org)
        org_id = data.pop("id")

        # RESOLUTION
        org = self._get_org(org_id)
        for field_name, value in data.items():
            setattr(org, field_name, value)
        org.updated_at = datetime.utcnow()
        self.db.commit()

        logger.info(f"Org {org_id} updated fields: {sorted(data)}")
        return True

    def remove_billing_leader(self, auth_token: Optional[AuthToken], org_id: str, user_id: str,
                              via_websocket: bool) -> bool:
        """Demote a billing leader to a regular member of the org"""
        # AUTH
        require_websocket(via_websocket)
        require_org_leader(self.db, auth_token, org_id)

        # RESOLUTION
        membership = self.db.query(OrganizationUser).filter(
            OrganizationUser.org_id == org_id,
            OrganizationUser.user_id == user_id,
        ).first()
        if membership is not None and membership.is_billing_leader:
            membership.role = OrgUserRole.MEMBER.value
            membership.updated_at = datetime.utcnow()
            self.db.commit()
            logger.info(f"User {user_id} is no longer a billing leader of org {org_id}")
        return True

    def count_pauses_this_period(self, user_id: str, org: Organization) -> int:
        """Number of times the user was paused in the org's current billing period"""
        if not org.stripe_subscription_id:
            return 0
        subscription = self.gateway.retrieve_subscription(org.stripe_subscription_id)
        start_at = subscription["current_period_start"]
        end_at = subscription["current_period_end"]
        return self.db.query(InvoiceItemHook).filter(
            InvoiceItemHook.org_id == org.id,
            InvoiceItemHook.proration_date >= start_at,
            InvoiceItemHook.proration_date <= end_at,
            InvoiceItemHook.user_id == user_id,
            InvoiceItemHook.type == InvoiceItemType.PAUSE_USER.value,
        ).count()

    def inactivate_user(self, auth_token: Optional[AuthToken], user_id: str) -> bool:
        """Pause the subscription for a single user in every org they belong to"""
        # AUTH
        require_org_leader_of_user(self.db, auth_token, user_id)

        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"{user_id} does not exist")
        if user.inactive:
            raise BusinessRuleError(f"{user_id} is already inactive. cannot inactivate twice")

        org_ids = user.org_ids
        orgs = self.db.query(Organization).filter(Organization.id.in_(org_ids)).all()
        pauses_by_org = [self.count_pauses_this_period(user_id, org) for org in orgs]
        triggered_pauses = max(pauses_by_org, default=0)
        if triggered_pauses >= config.MAX_MONTHLY_PAUSES:
            raise BusinessRuleError("Max monthly pauses exceeded for this user")

        # RESOLUTION
        adjust_user_count(self.db, self.gateway, user_id, org_ids, InvoiceItemType.PAUSE_USER)
        return True

    def remove_org_user(self, auth_token: Optional[AuthToken], org_id: str, user_id: str) -> bool:
        """Remove a user from an org, dropping any billing leader role with it"""
        # AUTH
        require_org_leader(self.db, auth_token, org_id)

        # RESOLUTION
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"{user_id} does not exist")
        membership = self.db.query(OrganizationUser).filter(
            OrganizationUser.org_id == org_id,
            OrganizationUser.user_id == user_id,
        ).first()
        if membership is None:
            raise BusinessRuleError(f"{user_id} is not a part of org {org_id}")

        self.db.delete(membership)
        self.db.flush()
        adjust_user_count(self.db, self.gateway, user_id, org_id, InvoiceItemType.REMOVE_USER)
        logger.info(f"User {user_id} removed from org {org_id}")
        return True

    def create_org_picture_put_url(self, auth_token: Optional[AuthToken], org_id: str,
                                   content_type: Optional[str], content_length: int) -> str:
        """Create a PUT URL on the CDN for an organization's profile picture"""
        # AUTH
        require_org_leader(self.db, auth_token, org_id)

        # VALIDATION
        ext = validate_avatar_upload(content_type, content_length)

        # RESOLUTION
        partial_path = f"Organization/{org_id}/picture/{uuid.uuid4().hex[:10]}.{ext}"
        return self.storage.get_put_url(partial_path, content_type, content_length)

    def add_billing(self, auth_token: Optional[AuthToken], org_id: str, stripe_token: str) -> bool:
        """Attach a credit card to the org's billing customer"""
        # AUTH
        require_org_leader(self.db, auth_token, org_id)

        # RESOLUTION
        org = self._get_org(org_id)
        if not org.stripe_id:
            raise BusinessRuleError(f"Organization {org_id} has no billing account")
        self.gateway.update_customer_source(org.stripe_id, stripe_token)
        org.updated_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"Payment source updated for org {org_id}")
        return True

    def add_org(self, auth_token: Optional[AuthToken], org_name: str, team_name: str) -> Organization:
        """Create an org and its first team, with the viewer as billing leader"""
        # AUTH
        auth_token = require_auth(auth_token)
        viewer = self.db.get(User, auth_token.user_id)
        if viewer is None:
            raise NotFoundError(f"{auth_token.user_id} does not exist")

        # VALIDATION
        new_org = validate_new_org(org_name, team_name)

        # RESOLUTION
        now = datetime.utcnow()
        org = Organization(
            name=new_org.org_name,
            active_user_count=1,
            inactive_user_count=0,
            period_start=now,
            period_end=now + timedelta(days=config.TRIAL_PERIOD_DAYS),
        )
        self.db.add(org)
        self.db.flush()

        team = Team(name=new_org.team_name, org_id=org.id)
        self.db.add(team)
        self.db.flush()
        self.db.add(OrganizationUser(org_id=org.id, user_id=viewer.id, role=OrgUserRole.BILLING_LEADER.value))
        self.db.add(TeamMember(id=team_member_id(viewer.id, team.id), team_id=team.id, user_id=viewer.id))

        customer = self.gateway.create_customer(viewer.email, org.id)
        subscription = self.gateway.create_subscription(
            customer["customer_id"],
            config.STRIPE_PLAN_ID,
            quantity=org.active_user_count,
            trial_period_days=config.TRIAL_PERIOD_DAYS,
            metadata={"orgId": org.id},
        )
        org.stripe_id = customer["customer_id"]
        org.stripe_subscription_id = subscription["subscription_id"]
        if subscription.get("current_period_start"):
            org.period_start = datetime.utcfromtimestamp(subscription["current_period_start"])
        if subscription.get("current_period_end"):
            org.period_end = datetime.utcfromtimestamp(subscription["current_period_end"])

        self.db.commit()
        self.db.refresh(org)
        logger.info(f"Created org {org.id} with team {team.id} for user {viewer.id}")
        return org
