"""
Template Service - reflect templates, their prompts, and prompt group colors
"""
from datetime import datetime
from typing import Dict, List, Optional, Sequence
import logging

from sqlalchemy.orm import Session

from ..auth import AuthToken
from ..db.models import ReflectTemplate, RetroPhaseItem
from ..exceptions import BusinessRuleError, ForbiddenError, ValidationError
from .authorization import require_auth, require_team_member
from .palette import PALETTE_OPTIONS, is_palette_color, normalize_hex

logger = logging.getLogger(__name__)


def load_phase_items_by_team_ids(db: Session, team_ids: Sequence[str]) -> List[List[RetroPhaseItem]]:
    """Batch load the active prompts of several teams, one list per team id in order"""
    rows = db.query(RetroPhaseItem).filter(
        RetroPhaseItem.team_id.in_(list(team_ids)),
        RetroPhaseItem.is_active.is_(True),
    ).order_by(RetroPhaseItem.sort_order).all()
    by_team: Dict[str, List[RetroPhaseItem]] = {team_id: [] for team_id in team_ids}
    for row in rows:
        by_team[row.team_id].append(row)
    return [by_team[team_id] for team_id in team_ids]


def prompts_for_template(template_id: str, phase_items: Sequence[RetroPhaseItem]) -> List[RetroPhaseItem]:
    return [item for item in phase_items if item.template_id == template_id]


def palette_choices(prompt: RetroPhaseItem, prompts: Sequence[RetroPhaseItem]) -> List[Dict[str, object]]:
    """
    Every palette color with whether the prompt may pick it

    A color is available when no prompt of the template uses it, including
    the prompt itself, whose own color is flagged as current instead.
    """
    taken = {normalize_hex(item.group_color) for item in prompts}
    current = normalize_hex(prompt.group_color)
    return [
        {
            "name": color.name,
            "hex": color.hex,
            "is_available": color.hex not in taken,
            "is_current_color": color.hex == current,
        }
        for color in PALETTE_OPTIONS
    ]


class TemplateService:
    """Service behind the reflect template queries and mutations"""

    def __init__(self, db: Session):
        self.db = db

    def get_templates(self, auth_token: Optional[AuthToken], team_id: str) -> List[ReflectTemplate]:
        require_team_member(auth_token, team_id)
        return self.db.query(ReflectTemplate).filter(
            ReflectTemplate.team_id == team_id,
            ReflectTemplate.is_active.is_(True),
        ).order_by(ReflectTemplate.created_at).all()

    def update_prompt_group_color(self, auth_token: Optional[AuthToken], prompt_id: str,
                                  group_color: str) -> RetroPhaseItem:
        """Change the group color of a prompt to a color no sibling prompt uses"""
        # AUTH
        auth_token = require_auth(auth_token)
        prompt = self.db.get(RetroPhaseItem, prompt_id)
        # Missing prompts and prompts on other teams look the same to the viewer
        if prompt is None or not prompt.is_active or prompt.team_id not in auth_token.tms:
            raise ForbiddenError(f"Unauthorized. Prompt {prompt_id} is not on one of your teams")

        # VALIDATION
        if not is_palette_color(group_color):
            raise ValidationError(f"{group_color} is not a palette color",
                                  details={"errors": {"groupColor": "Pick a color from the palette"}})
        color = normalize_hex(group_color)
        if normalize_hex(prompt.group_color) == color:
            return prompt

        sibling = self.db.query(RetroPhaseItem).filter(
            RetroPhaseItem.template_id == prompt.template_id,
            RetroPhaseItem.id != prompt.id,
            RetroPhaseItem.is_active.is_(True),
            RetroPhaseItem.group_color == color,
        ).first()
        if sibling is not None:
            raise BusinessRuleError(f"{color} is already used by another prompt in this template")

        # RESOLUTION
        prompt.group_color = color
        prompt.updated_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"Prompt {prompt_id} group color set to {color}")
        return prompt
