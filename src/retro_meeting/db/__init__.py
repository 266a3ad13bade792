"""
Database module for the Retro Meeting server
"""
from .engine import engine, SessionLocal, get_db, init_db
from .base import Base, generate_id
from .models import (
    User,
    Organization,
    OrganizationUser,
    OrgUserRole,
    InvoiceItemHook,
    InvoiceItemType,
    Team,
    TeamMember,
    AgendaItem,
    ReflectTemplate,
    RetroPhaseItem,
)

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "Base",
    "generate_id",
    "User",
    "Organization",
    "OrganizationUser",
    "OrgUserRole",
    "InvoiceItemHook",
    "InvoiceItemType",
    "Team",
    "TeamMember",
    "AgendaItem",
    "ReflectTemplate",
    "RetroPhaseItem",
]
