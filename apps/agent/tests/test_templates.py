"""Prompt template rendering."""

import pytest

from templates import get_templates
from templates.rule import PARSE_TEMPLATE, RECOMMEND_TEMPLATE, format_existing_rules


class TestTemplates:
    def test_registry_covers_every_stage(self):
        assert sorted(get_templates()) == ["connection", "modify", "parse", "recommend", "refine", "validate"]

    def test_render_fills_user_message_only(self):
        prompt = PARSE_TEMPLATE.render(rule="If order is over $100, apply 10% discount")
        assert "If order is over $100, apply 10% discount" in prompt.user
        assert prompt.system == PARSE_TEMPLATE.system
        assert prompt.template == "parse"
        assert prompt.version == PARSE_TEMPLATE.version
        assert prompt.temperature == pytest.approx(0.1)

    def test_recommend_limits(self):
        prompt = RECOMMEND_TEMPLATE.render(rule="r", existing_rules=format_existing_rules([]))
        assert prompt.max_tokens == 300
        assert "(none)" in prompt.user

    def test_key_combines_name_and_version(self):
        assert RECOMMEND_TEMPLATE.key == f"recommend@{RECOMMEND_TEMPLATE.version}"
