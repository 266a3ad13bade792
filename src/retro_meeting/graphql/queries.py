"""
GraphQL queries
"""
from typing import List, Optional

import strawberry
from strawberry.types import Info

from ..db import models
from ..exceptions import NotFoundError
from ..services.authorization import require_auth, require_org_member
from ..services.meeting_service import MeetingService
from ..services.template_service import TemplateService
from .types import Organization, ReflectTemplate, Team, User


@strawberry.type
class Query:

    @strawberry.field(description="The authenticated user")
    def viewer(self, info: Info) -> User:
        auth_token = require_auth(info.context.auth_token)
        user = info.context.db.get(models.User, auth_token.user_id)
        if user is None:
            raise NotFoundError(f"{auth_token.user_id} does not exist")
        return User.from_model(user)

    @strawberry.field(description="An organization the viewer belongs to")
    def organization(self, info: Info, org_id: strawberry.ID) -> Organization:
        require_org_member(info.context.db, info.context.auth_token, org_id)
        org = info.context.db.get(models.Organization, org_id)
        if org is None:
            raise NotFoundError(f"Organization {org_id} does not exist")
        return Organization.from_model(org)

    @strawberry.field(description="A team the viewer belongs to")
    def team(self, info: Info, team_id: strawberry.ID) -> Optional[Team]:
        team = MeetingService(info.context.db).get_team(info.context.auth_token, team_id)
        return Team.from_model(team) if team else None

    @strawberry.field(description="The active reflect templates of a team")
    def reflect_templates(self, info: Info, team_id: strawberry.ID) -> List[ReflectTemplate]:
        templates = TemplateService(info.context.db).get_templates(info.context.auth_token, team_id)
        return [ReflectTemplate.from_model(template) for template in templates]
