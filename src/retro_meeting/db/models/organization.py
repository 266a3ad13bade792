"""
Organization and OrganizationUser models
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ..base import Base, generate_id


class OrgUserRole(str, enum.Enum):
    """Role of a user inside an organization"""
    BILLING_LEADER = "billingLeader"
    MEMBER = "member"


class Organization(Base):
    """Organization model"""
    __tablename__ = "organizations"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False, index=True)
    picture = Column(String, nullable=True)

    # Stripe customer and per-seat subscription
    stripe_id = Column(String, nullable=True, index=True)
    stripe_subscription_id = Column(String, nullable=True, unique=True, index=True)
    active_user_count = Column(Integer, default=0, nullable=False)
    inactive_user_count = Column(Integer, default=0, nullable=False)
    period_start = Column(DateTime, nullable=True)
    period_end = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    org_users = relationship("OrganizationUser", back_populates="organization", cascade="all, delete-orphan")
    teams = relationship("Team", back_populates="organization", cascade="all, delete-orphan")


class OrganizationUser(Base):
    """Membership of a user in an organization"""
    __tablename__ = "organization_users"

    org_id = Column(String, ForeignKey("organizations.id"), primary_key=True, nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), primary_key=True, nullable=False, index=True)
    role = Column(String, nullable=False, default=OrgUserRole.MEMBER.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    organization = relationship("Organization", back_populates="org_users")
    user = relationship("User", back_populates="org_memberships")

    @property
    def is_billing_leader(self) -> bool:
        return self.role == OrgUserRole.BILLING_LEADER.value
