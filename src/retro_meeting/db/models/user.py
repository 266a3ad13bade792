"""
User model
"""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime

from ..base import Base, generate_id


class User(Base):
    """User account model"""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=False)
    preferred_name = Column(String, nullable=False)
    picture = Column(String, nullable=True)

    # Paused for billing purposes
    inactive = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    org_memberships = relationship("OrganizationUser", back_populates="user", cascade="all, delete-orphan")
    team_memberships = relationship("TeamMember", back_populates="user", cascade="all, delete-orphan")

    @property
    def org_ids(self):
        return [membership.org_id for membership in self.org_memberships]

    @property
    def billing_leader_org_ids(self):
        return [membership.org_id for membership in self.org_memberships if membership.is_billing_leader]
