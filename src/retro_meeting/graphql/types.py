"""
GraphQL object types
"""
from datetime import datetime
from typing import List, NewType, Optional
from urllib.parse import urlparse

import strawberry
from strawberry.types import Info

from ..db import models
from ..services.meeting_service import MeetingService, find_agenda_item
from ..services.template_service import palette_choices, prompts_for_template


def _parse_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"{value} is not a valid URL")
    return value


URL = strawberry.scalar(
    NewType("URL", str),
    serialize=str,
    parse_value=_parse_url,
    description="A stringified URL",
)


@strawberry.type(description="An organization")
class Organization:
    id: strawberry.ID
    name: str = strawberry.field(description="The name of the organization")
    picture: Optional[str] = strawberry.field(description="The org avatar")
    active_user_count: int = strawberry.field(description="The number of active (billed) seats")
    inactive_user_count: int = strawberry.field(description="The number of paused seats")
    period_start: Optional[datetime] = strawberry.field(description="Start of the current billing period")
    period_end: Optional[datetime] = strawberry.field(description="End of the current billing period")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, org: models.Organization) -> "Organization":
        return cls(
            id=strawberry.ID(org.id),
            name=org.name,
            picture=org.picture,
            active_user_count=org.active_user_count,
            inactive_user_count=org.inactive_user_count,
            period_start=org.period_start,
            period_end=org.period_end,
            created_at=org.created_at,
            updated_at=org.updated_at,
        )


@strawberry.type(description="A member of a team, as seen in meetings")
class TeamMember:
    id: strawberry.ID
    user_id: strawberry.ID
    team_id: strawberry.ID
    preferred_name: str
    picture: Optional[str]

    @classmethod
    def from_model(cls, member: models.TeamMember) -> "TeamMember":
        return cls(
            id=strawberry.ID(member.id),
            user_id=strawberry.ID(member.user_id),
            team_id=strawberry.ID(member.team_id),
            preferred_name=member.user.preferred_name,
            picture=member.user.picture,
        )


@strawberry.type(description="A request placed on the agenda for the team meeting")
class AgendaItem:
    id: strawberry.ID
    content: str = strawberry.field(description="The body of the agenda item")
    is_active: bool
    sort_order: int
    team_id: strawberry.ID
    team_member: TeamMember = strawberry.field(description="The team member that created the agenda item")

    @classmethod
    def from_model(cls, item: models.AgendaItem) -> "AgendaItem":
        return cls(
            id=strawberry.ID(item.id),
            content=item.content,
            is_active=item.is_active,
            sort_order=item.sort_order,
            team_id=strawberry.ID(item.team_id),
            team_member=TeamMember.from_model(item.team_member),
        )


@strawberry.type
class Team:
    id: strawberry.ID
    name: str
    org_id: strawberry.ID
    meeting_id: Optional[strawberry.ID] = strawberry.field(description="The id of the team's active meeting, if any")

    @strawberry.field(description="The agenda items for the upcoming or current meeting")
    def agenda_items(self, info: Info) -> List[AgendaItem]:
        items = MeetingService(info.context.db).get_agenda_items(info.context.auth_token, self.id)
        return [AgendaItem.from_model(item) for item in items]

    @strawberry.field(description="The agenda item a meeting stage points at, null if it was removed")
    def agenda_item(self, info: Info, agenda_item_id: strawberry.ID) -> Optional[AgendaItem]:
        items = MeetingService(info.context.db).get_agenda_items(info.context.auth_token, self.id)
        item = find_agenda_item(items, agenda_item_id)
        return AgendaItem.from_model(item) if item else None

    @classmethod
    def from_model(cls, team: models.Team) -> "Team":
        return cls(
            id=strawberry.ID(team.id),
            name=team.name,
            org_id=strawberry.ID(team.org_id),
            meeting_id=strawberry.ID(team.meeting_id) if team.meeting_id else None,
        )


@strawberry.type
class User:
    id: strawberry.ID
    email: str
    preferred_name: str
    picture: Optional[str]
    inactive: bool = strawberry.field(description="True if the user is paused for billing")

    @strawberry.field(description="The teams the viewer is a member of")
    def teams(self, info: Info) -> List[Team]:
        teams = MeetingService(info.context.db).get_viewer_teams(info.context.auth_token)
        return [Team.from_model(team) for team in teams]

    @classmethod
    def from_model(cls, user: models.User) -> "User":
        return cls(
            id=strawberry.ID(user.id),
            email=user.email,
            preferred_name=user.preferred_name,
            picture=user.picture,
            inactive=user.inactive,
        )


@strawberry.type(description="A color a prompt may use to label its reflection groups")
class PaletteColor:
    name: str
    hex: str
    is_available: bool = strawberry.field(description="False if a prompt in the template already uses it")
    is_current_color: bool


@strawberry.type(description="A team-specific reflection prompt")
class RetroPhaseItem:
    id: strawberry.ID
    created_at: datetime
    phase_item_type: str
    is_active: bool
    sort_order: float = strawberry.field(description="the order of the items in the template")
    team_id: strawberry.ID = strawberry.field(description="foreign key. use the team field")
    template_id: strawberry.ID = strawberry.field(description="FK for template")
    question: str = strawberry.field(description="The question to answer during the phase")
    group_color: str = strawberry.field(description="The color used to visually group a phase item")
    updated_at: datetime

    @strawberry.field(description="The palette colors this prompt can switch to")
    async def palette(self, info: Info) -> List[PaletteColor]:
        phase_items = await info.context.custom_phase_items_by_team_id.load(self.team_id)
        siblings = prompts_for_template(self.template_id, phase_items)
        return [PaletteColor(**choice) for choice in palette_choices(self, siblings)]

    @classmethod
    def from_model(cls, item: models.RetroPhaseItem) -> "RetroPhaseItem":
        return cls(
            id=strawberry.ID(item.id),
            created_at=item.created_at,
            phase_item_type=item.phase_item_type,
            is_active=item.is_active,
            sort_order=float(item.sort_order),
            team_id=strawberry.ID(item.team_id),
            template_id=strawberry.ID(item.template_id),
            question=item.question,
            group_color=item.group_color,
            updated_at=item.updated_at,
        )


@strawberry.type(description="The team-specific templates for the reflection prompts")
class ReflectTemplate:
    id: strawberry.ID
    created_at: datetime
    is_active: bool = strawberry.field(description="True if template can be used, else false")
    last_used_at: Optional[datetime] = strawberry.field(description="The time of the meeting the template was last used")
    name: str = strawberry.field(description="The name of the template")
    team_id: strawberry.ID = strawberry.field(description="*Foreign key. The team this template belongs to")
    updated_at: datetime

    @strawberry.field(description="The prompts that are part of this template")
    async def prompts(self, info: Info) -> List[RetroPhaseItem]:
        phase_items = await info.context.custom_phase_items_by_team_id.load(self.team_id)
        return [RetroPhaseItem.from_model(item) for item in prompts_for_template(self.id, phase_items)]

    @classmethod
    def from_model(cls, template: models.ReflectTemplate) -> "ReflectTemplate":
        return cls(
            id=strawberry.ID(template.id),
            created_at=template.created_at,
            is_active=template.is_active,
            last_used_at=template.last_used_at,
            name=template.name,
            team_id=strawberry.ID(template.team_id),
            updated_at=template.updated_at,
        )


@strawberry.input(description="The updated org including the id, and at least one other field")
class UpdateOrgInput:
    id: strawberry.ID = strawberry.field(description="The unique action ID")
    name: Optional[str] = strawberry.field(default=None, description="The name of the org")
    picture: Optional[URL] = strawberry.field(default=None, description="The org avatar")

    def to_dict(self) -> dict:
        data = {"id": str(self.id)}
        if self.name is not None:
            data["name"] = self.name
        if self.picture is not None:
            data["picture"] = self.picture
        return data


@strawberry.input
class NewTeamInput:
    name: str = strawberry.field(description="The name of the team")
