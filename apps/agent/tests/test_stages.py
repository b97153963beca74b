"""Unit tests for the individual pipeline stages."""

import json

import pytest

from agents.modifier import RuleModifier
from agents.parser import RuleParser
from agents.recommender import RecommendationEngine
from agents.refiner import RuleRefiner
from agents.validator import CrossRuleValidator
from helper.refine import MESSAGE_GIBBERISH, MESSAGE_TOO_SHORT
from helper.validation import DEGRADED_VALIDATION_SUGGESTION

from .conftest import StubGateway

VIP_RULE = "If customer is VIP and order value is over $100, apply 10% discount"


class TestRuleParser:
    def test_model_reply_kept_as_is(self):
        reply = {
            "condition": "order_value > 100",
            "action": "apply_discount",
            "parameters": {"discount_percentage": 10},
            "logic": {"if": {"field": "order_value", "operator": ">", "value": 100}},
            "confidence": 0.9,
        }
        gateway = StubGateway({"parse": "```json\n" + json.dumps(reply) + "\n```"})
        parsed = RuleParser(gateway).parse(VIP_RULE)
        assert parsed.source == "model"
        assert parsed.model_dump() == reply

    def test_failure_returns_all_four_fields(self, failing_gateway):
        parsed = RuleParser(failing_gateway).parse(VIP_RULE)
        dumped = parsed.model_dump()
        assert parsed.source == "fallback"
        for key in ("condition", "action", "parameters", "logic"):
            assert dumped[key] is not None

    def test_fallback_is_deterministic(self, failing_gateway):
        parser = RuleParser(failing_gateway)
        assert parser.parse(VIP_RULE).model_dump() == parser.parse(VIP_RULE).model_dump()

    @pytest.mark.parametrize("reply", ["not json", "[1, 2]", '{"parameters": "oops"}'])
    def test_unusable_reply_falls_back(self, reply):
        parsed = RuleParser(StubGateway({"parse": reply})).parse(VIP_RULE)
        assert parsed.source == "fallback"
        assert parsed.action == "apply_discount"


class TestRuleRefiner:
    @pytest.mark.parametrize(
        "rule,message",
        [("xyz", MESSAGE_TOO_SHORT), ("qwrtypl", MESSAGE_GIBBERISH)],
    )
    def test_precheck_rejects_without_model_call(self, rule, message):
        gateway = StubGateway({"refine": "{}"})
        refinement = RuleRefiner(gateway).refine(rule)
        assert refinement.isValid is False
        assert refinement.validationMessage == message
        assert refinement.improvedRule == rule
        assert refinement.source == "precheck"
        assert gateway.calls == 0

    def test_model_reply_fields_verbatim(self):
        reply = {
            "improvedRule": "If order subtotal exceeds $100, apply a 10% discount",
            "improvements": ["Clarified subtotal", "Stated exact percentage"],
            "reasoning": "Removes ambiguity about taxes",
        }
        gateway = StubGateway({"refine": json.dumps(reply)})
        refinement = RuleRefiner(gateway).refine("If order over 100 then discount 10%")
        assert refinement.isValid is True
        assert refinement.improvedRule == reply["improvedRule"]
        assert refinement.improvements == reply["improvements"]
        assert refinement.reasoning == reply["reasoning"]
        assert refinement.originalRule == "If order over 100 then discount 10%"
        assert refinement.source == "model"

    def test_missing_fields_default(self):
        gateway = StubGateway({"refine": "{}"})
        refinement = RuleRefiner(gateway).refine("If order over 100 then discount 10%")
        assert refinement.improvedRule == "If order over 100 then discount 10%"
        assert refinement.improvements == []
        assert refinement.reasoning == "AI provided refinement suggestions"

    def test_failure_uses_heuristics(self, failing_gateway):
        refinement = RuleRefiner(failing_gateway).refine("When stock is below 15 units, notify buyers")
        assert refinement.isValid is True
        assert refinement.source == "fallback"
        assert "15 units" in refinement.improvedRule


class TestRecommendationEngine:
    def test_model_reply(self):
        gateway = StubGateway({"recommend": '["Cap the discount at $50", "  ", 7, "Exclude sale items"]'})
        result = RecommendationEngine(gateway).recommend(VIP_RULE, ["Orders over $500 ship free"])
        assert result.recommendations == ["Cap the discount at $50", "Exclude sale items"]
        assert result.source == "model"
        assert "- Orders over $500 ship free" in gateway.calls_for("recommend")[0].user

    def test_no_siblings_rendered_as_none(self):
        gateway = StubGateway({"recommend": '["x"]'})
        RecommendationEngine(gateway).recommend(VIP_RULE)
        assert "(none)" in gateway.prompts[0].user

    @pytest.mark.parametrize("reply", ["definitely not json", '{"items": []}', "[]"])
    def test_unusable_reply_non_empty(self, reply):
        result = RecommendationEngine(StubGateway({"recommend": reply})).recommend(VIP_RULE)
        assert result.recommendations
        assert result.source == "fallback"

    def test_failure_non_empty(self, failing_gateway):
        result = RecommendationEngine(failing_gateway).recommend(VIP_RULE)
        assert len(result.recommendations) == 5


class TestCrossRuleValidator:
    def test_empty_rule_set(self):
        gateway = StubGateway({"validate": '{"valid": false}'})
        result = CrossRuleValidator(gateway).validate([])
        assert result.model_dump() == {"valid": True, "conflicts": [], "suggestions": []}
        assert gateway.calls == 0
        assert result.source == "trivial"
        assert not result.degraded

    def test_failure_is_conservative(self, failing_gateway):
        result = CrossRuleValidator(failing_gateway).validate(["rule A", "rule B"])
        assert result.valid is True
        assert result.conflicts == []
        assert result.suggestions == [DEGRADED_VALIDATION_SUGGESTION]
        assert result.degraded

    def test_model_reply_and_numbered_prompt(self):
        reply = {"valid": False, "conflicts": ["Rule 1 and Rule 2 overlap"], "suggestions": ["Merge them"]}
        gateway = StubGateway({"validate": json.dumps(reply)})
        result = CrossRuleValidator(gateway).validate(["rule A", "rule B"])
        assert result.model_dump() == reply
        assert gateway.prompts[0].user == "Rules:\n1. rule A\n2. rule B"

    def test_undecodable_reply_is_conservative(self):
        result = CrossRuleValidator(StubGateway({"validate": "Looks fine!"})).validate(["rule A"])
        assert result.valid is True
        assert result.suggestions == [DEGRADED_VALIDATION_SUGGESTION]


class TestRuleModifier:
    def test_model_reply_stripped(self):
        gateway = StubGateway({"modify": "```\nIf order value is over $200, apply 10% discount\n```"})
        result = RuleModifier(gateway).modify("raise threshold to 200", "If order value is over $100, apply 10% discount")
        assert result.modifiedRule == "If order value is over $200, apply 10% discount"
        assert result.source == "model"

    def test_failure_returns_unchanged(self, offline_gateway):
        rule = "If order value is over $100, apply 10% discount"
        result = RuleModifier(offline_gateway).modify("make it 15%", rule)
        assert result.modifiedRule == rule
        assert result.source == "fallback"
