"""
Database models for the Retro Meeting server
"""
from .user import User
from .organization import Organization, OrganizationUser, OrgUserRole
from .billing import InvoiceItemHook, InvoiceItemType
from .team import Team, TeamMember, AgendaItem, team_member_id
from .template import ReflectTemplate, RetroPhaseItem

__all__ = [
    "User",
    "Organization",
    "OrganizationUser",
    "OrgUserRole",
    "InvoiceItemHook",
    "InvoiceItemType",
    "Team",
    "TeamMember",
    "AgendaItem",
    "team_member_id",
    "ReflectTemplate",
    "RetroPhaseItem",
]
