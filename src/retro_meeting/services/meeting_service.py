"""
Meeting Service - agenda items and the viewer's dashboard teams
"""
from typing import List, Optional, Sequence
import logging

from sqlalchemy.orm import Session, joinedload

from ..auth import AuthToken
from ..db.models import AgendaItem, Team, TeamMember
from .authorization import require_auth, require_team_member

logger = logging.getLogger(__name__)


def find_agenda_item(agenda_items: Sequence[AgendaItem], agenda_item_id: Optional[str]) -> Optional[AgendaItem]:
    """The item the meeting stage points at, or None if it was removed meanwhile"""
    if not agenda_item_id:
        return None
    return next((item for item in agenda_items if item.id == agenda_item_id), None)


class MeetingService:

    def __init__(self, db: Session):
        self.db = db

    def get_agenda_items(self, auth_token: Optional[AuthToken], team_id: str) -> List[AgendaItem]:
        require_team_member(auth_token, team_id)
        return self.db.query(AgendaItem).options(
            joinedload(AgendaItem.team_member).joinedload(TeamMember.user)
        ).filter(
            AgendaItem.team_id == team_id,
            AgendaItem.is_active.is_(True),
        ).order_by(AgendaItem.sort_order).all()

    def get_team(self, auth_token: Optional[AuthToken], team_id: str) -> Optional[Team]:
        require_team_member(auth_token, team_id)
        return self.db.get(Team, team_id)

    def get_viewer_teams(self, auth_token: Optional[AuthToken]) -> List[Team]:
        auth_token = require_auth(auth_token)
        return self.db.query(Team).join(TeamMember, TeamMember.team_id == Team.id).filter(
            TeamMember.user_id == auth_token.user_id,
            TeamMember.is_not_removed.is_(True),
            Team.is_archived.is_(False),
        ).order_by(Team.name).all()
