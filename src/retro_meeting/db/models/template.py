"""
Reflect template and retro phase item (prompt) models
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from ..base import Base, generate_id


class ReflectTemplate(Base):
    """A team's named set of reflection prompts"""
    __tablename__ = "reflect_templates"

    id = Column(String, primary_key=True, default=generate_id)
    team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    prompts = relationship("RetroPhaseItem", back_populates="template")


class RetroPhaseItem(Base):
    """A reflection prompt; reflections grouped under it take its group color"""
    __tablename__ = "retro_phase_items"

    id = Column(String, primary_key=True, default=generate_id)
    team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    template_id = Column(String, ForeignKey("reflect_templates.id"), nullable=False, index=True)
    phase_item_type = Column(String, nullable=False, default="retroPhaseItem")
    question = Column(String, nullable=False)
    group_color = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    template = relationship("ReflectTemplate", back_populates="prompts")
