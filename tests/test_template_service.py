"""
Tests for reflect templates and prompt group colors
"""
from types import SimpleNamespace

import pytest

from retro_meeting.auth import AuthToken
from retro_meeting.db import ReflectTemplate, RetroPhaseItem
from retro_meeting.exceptions import AuthError, BusinessRuleError, ForbiddenError, ValidationError
from retro_meeting.services.palette import PALETTE_OPTIONS, is_palette_color, normalize_hex
from retro_meeting.services.template_service import (
    TemplateService,
    load_phase_items_by_team_ids,
    palette_choices,
    prompts_for_template,
)

TOMATO = PALETTE_OPTIONS[0].hex
TANGERINE = PALETTE_OPTIONS[1].hex
SUN = PALETTE_OPTIONS[2].hex


@pytest.fixture
def template_setup(db_session, org_setup):
    team = org_setup["team"]
    template = ReflectTemplate(team_id=team.id, name="Start Stop Continue")
    db_session.add(template)
    db_session.flush()
    prompts = [
        RetroPhaseItem(team_id=team.id, template_id=template.id, question=question,
                       group_color=color, sort_order=sort_order)
        for sort_order, (question, color) in enumerate([("Start", TOMATO), ("Stop", TANGERINE)])
    ]
    db_session.add_all(prompts)
    db_session.commit()
    return {"template": template, "prompts": prompts, "team": team}


class TestPalette:

    def test_palette_has_twelve_unique_colors(self):
        hexes = [color.hex for color in PALETTE_OPTIONS]
        assert len(hexes) == 12
        assert len(set(hexes)) == 12

    def test_hex_matching_ignores_case_and_whitespace(self):
        assert normalize_hex(" #e55c5c ") == TOMATO
        assert is_palette_color("#e55c5c")
        assert not is_palette_color("#123456")

    def test_palette_choices(self):
        prompt = SimpleNamespace(group_color=TOMATO)
        sibling = SimpleNamespace(group_color=TANGERINE)

        choices = {choice["hex"]: choice for choice in palette_choices(prompt, [prompt, sibling])}

        assert len(choices) == 12
        assert choices[TOMATO]["is_current_color"] is True
        assert choices[TOMATO]["is_available"] is False
        assert choices[TANGERINE]["is_available"] is False
        assert choices[TANGERINE]["is_current_color"] is False
        assert choices[SUN]["is_available"] is True


class TestPhaseItemLoading:

    def test_batch_load_keeps_key_order(self, db_session, template_setup):
        team_id = template_setup["team"].id

        result = load_phase_items_by_team_ids(db_session, ["missing-team", team_id])

        assert result[0] == []
        assert [item.question for item in result[1]] == ["Start", "Stop"]

    def test_inactive_prompts_are_skipped(self, db_session, template_setup):
        template_setup["prompts"][1].is_active = False
        db_session.commit()

        result = load_phase_items_by_team_ids(db_session, [template_setup["team"].id])

        assert [item.question for item in result[0]] == ["Start"]

    def test_prompts_for_template(self):
        items = [SimpleNamespace(template_id="t1"), SimpleNamespace(template_id="t2")]

        assert prompts_for_template("t2", items) == [items[1]]


class TestTemplateService:
    """Test template queries and the group color mutation"""

    def test_get_templates(self, db_session, template_setup, member_token):
        templates = TemplateService(db_session).get_templates(member_token, template_setup["team"].id)

        assert [template.name for template in templates] == ["Start Stop Continue"]

    def test_get_templates_requires_team_member(self, db_session, template_setup):
        with pytest.raises(ForbiddenError):
            TemplateService(db_session).get_templates(AuthToken(sub="someone"), template_setup["team"].id)

    def test_change_color(self, db_session, template_setup, member_token):
        prompt = template_setup["prompts"][0]

        updated = TemplateService(db_session).update_prompt_group_color(member_token, prompt.id, SUN.lower())

        assert updated.group_color == SUN
        assert db_session.get(RetroPhaseItem, prompt.id).group_color == SUN

    def test_same_color_is_a_no_op(self, db_session, template_setup, member_token):
        prompt = template_setup["prompts"][0]

        updated = TemplateService(db_session).update_prompt_group_color(member_token, prompt.id, TOMATO)

        assert updated.group_color == TOMATO

    def test_color_taken_by_sibling(self, db_session, template_setup, member_token):
        prompt = template_setup["prompts"][0]

        with pytest.raises(BusinessRuleError, match="already used"):
            TemplateService(db_session).update_prompt_group_color(member_token, prompt.id, TANGERINE)

    def test_color_of_inactive_sibling_is_free(self, db_session, template_setup, member_token):
        template_setup["prompts"][1].is_active = False
        db_session.commit()

        updated = TemplateService(db_session).update_prompt_group_color(
            member_token, template_setup["prompts"][0].id, TANGERINE
        )

        assert updated.group_color == TANGERINE

    def test_color_outside_palette(self, db_session, template_setup, member_token):
        with pytest.raises(ValidationError, match="not a palette color"):
            TemplateService(db_session).update_prompt_group_color(
                member_token, template_setup["prompts"][0].id, "#000000"
            )

    def test_unknown_prompt(self, db_session, template_setup, member_token):
        with pytest.raises(ForbiddenError, match="Prompt nope is not on one of your teams"):
            TemplateService(db_session).update_prompt_group_color(member_token, "nope", SUN)

    def test_outsider_cannot_tell_missing_prompts_apart(self, db_session, template_setup):
        outsider = AuthToken(sub="someone", tms=["other-team"])
        service = TemplateService(db_session)
        prompt_id = template_setup["prompts"][0].id

        with pytest.raises(ForbiddenError) as existing:
            service.update_prompt_group_color(outsider, prompt_id, SUN)
        with pytest.raises(ForbiddenError) as missing:
            service.update_prompt_group_color(outsider, "nope", SUN)

        assert str(existing.value).replace(prompt_id, "<id>") == str(missing.value).replace("nope", "<id>")

    def test_requires_login(self, db_session, template_setup):
        with pytest.raises(AuthError):
            TemplateService(db_session).update_prompt_group_color(None, "nope", SUN)

    def test_requires_team_member(self, db_session, template_setup):
        with pytest.raises(ForbiddenError):
            TemplateService(db_session).update_prompt_group_color(
                AuthToken(sub="someone", tms=["other-team"]), template_setup["prompts"][0].id, SUN
            )
