"""
Team, TeamMember and AgendaItem models
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from ..base import Base, generate_id


def team_member_id(user_id: str, team_id: str) -> str:
    return f"{user_id}::{team_id}"


class Team(Base):
    """Team model"""
    __tablename__ = "teams"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    org_id = Column(String, ForeignKey("organizations.id"), nullable=False, index=True)
    meeting_id = Column(String, nullable=True)  # active meeting, if any
    is_archived = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    organization = relationship("Organization", back_populates="teams")
    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan")
    agenda_items = relationship("AgendaItem", back_populates="team", cascade="all, delete-orphan")


class TeamMember(Base):
    """Membership of a user in a team"""
    __tablename__ = "team_members"

    id = Column(String, primary_key=True)
    team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    is_not_removed = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    team = relationship("Team", back_populates="members")
    user = relationship("User", back_populates="team_memberships")


class AgendaItem(Base):
    """A discussion item a team member brought to the meeting"""
    __tablename__ = "agenda_items"

    id = Column(String, primary_key=True, default=generate_id)
    team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    team_member_id = Column(String, ForeignKey("team_members.id"), nullable=False)
    content = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    team = relationship("Team", back_populates="agenda_items")
    team_member = relationship("TeamMember")
