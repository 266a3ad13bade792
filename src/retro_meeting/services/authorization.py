"""
Authorization predicates shared by every resolver

Each check raises instead of returning False so a resolver can call them in a
row before doing any work.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..auth import AuthToken
from ..db.models import OrganizationUser, OrgUserRole
from ..exceptions import AuthError, ForbiddenError

logger = logging.getLogger(__name__)


def require_auth(auth_token: Optional[AuthToken]) -> AuthToken:
    if auth_token is None:
        raise AuthError("Unauthorized. Please log in")
    return auth_token


def require_websocket(via_websocket: bool) -> None:
    """Some mutations are only accepted over the live meeting socket"""
    if not via_websocket:
        raise ForbiddenError("Websocket required")


def is_org_leader(db: Session, user_id: str, org_id: str) -> bool:
    return db.query(OrganizationUser).filter(
        OrganizationUser.org_id == org_id,
        OrganizationUser.user_id == user_id,
        OrganizationUser.role == OrgUserRole.BILLING_LEADER.value,
    ).first() is not None


def require_org_leader(db: Session, auth_token: Optional[AuthToken], org_id: str) -> None:
    auth_token = require_auth(auth_token)
    if not is_org_leader(db, auth_token.user_id, org_id):
        logger.warning(f"User {auth_token.user_id} is not a billing leader of org {org_id}")
        raise ForbiddenError("Unauthorized. Only an org leader can perform this action")


def require_org_leader_of_user(db: Session, auth_token: Optional[AuthToken], user_id: str) -> None:
    """The viewer must lead every org the target user belongs to"""
    auth_token = require_auth(auth_token)
    target_org_ids = {
        row.org_id for row in db.query(OrganizationUser).filter(OrganizationUser.user_id == user_id)
    }
    led_org_ids = {
        row.org_id for row in db.query(OrganizationUser).filter(
            OrganizationUser.user_id == auth_token.user_id,
            OrganizationUser.role == OrgUserRole.BILLING_LEADER.value,
        )
    }
    if not target_org_ids or not target_org_ids <= led_org_ids:
        logger.warning(f"User {auth_token.user_id} does not lead every org of user {user_id}")
        raise ForbiddenError("Unauthorized. Only an org leader of a user can modify it")


def require_org_member(db: Session, auth_token: Optional[AuthToken], org_id: str) -> None:
    auth_token = require_auth(auth_token)
    membership = db.query(OrganizationUser).filter(
        OrganizationUser.org_id == org_id,
        OrganizationUser.user_id == auth_token.user_id,
    ).first()
    if membership is None:
        raise ForbiddenError(f"Unauthorized. Not a member of org {org_id}")


def require_team_member(auth_token: Optional[AuthToken], team_id: str) -> None:
    auth_token = require_auth(auth_token)
    if team_id not in auth_token.tms:
        raise ForbiddenError(f"Unauthorized. Not a member of team {team_id}")
