"""Unit tests for the offline rule heuristics."""

import pytest

from contracts.rule import ValidationResult
from helper.recommend import RECOMMENDATION_BUCKETS, fallback_recommendations, recommendation_bucket
from helper.refine import classify_rule, heuristic_refinement, precheck_rule
from helper.rule import build_fallback_parsed_rule, extract_rule_signals, first_amount
from helper.validation import (
    DEGRADED_VALIDATION_SUGGESTION,
    conservative_validation,
    derive_status,
    validation_from_payload,
)


class TestRuleSignals:
    def test_dollar_amount_wins_over_percentage(self):
        assert first_amount("Give 10% off orders over $1,250") == 1250

    def test_bare_number_skips_percentages(self):
        assert first_amount("15% discount when stock below 20 units") == 20

    def test_no_amount(self):
        assert first_amount("If customer is VIP, apply discount") is None

    def test_signals(self):
        signals = extract_rule_signals("If VIP customer orders above $50, apply 12.5% discount")
        assert signals.discount_percentage == 12.5
        assert signals.amount == 50
        assert signals.is_vip
        assert signals.has_over
        assert not signals.has_below


class TestFallbackParsedRule:
    def test_vip_over_threshold(self):
        parsed = build_fallback_parsed_rule(
            "If customer is VIP and order value is over $100, apply 10% discount"
        )
        assert parsed.source == "fallback"
        assert parsed.action == "apply_discount"
        assert parsed.parameters == {
            "discount_percentage": 10,
            "threshold_amount": 100,
            "customer_status": "VIP",
        }
        assert parsed.condition == "customer_status == 'VIP' AND order_value > 100"
        assert parsed.logic["if"]["and"][1] == {"field": "order_value", "operator": ">", "value": 100}
        assert parsed.logic["then"] == {"action": "apply_discount", "value": 0.1}

    def test_below_threshold_alert(self):
        parsed = build_fallback_parsed_rule("When inventory is below 10 units, send alert to manager")
        assert parsed.action == "send_alert"
        assert parsed.condition == "inventory_count < 10"
        assert parsed.logic["then"] == {"action": "send_alert", "value": 1}

    def test_unrecognized_rule_keeps_original(self):
        rule = "Customers get a birthday email"
        parsed = build_fallback_parsed_rule(rule)
        assert parsed.action == "unknown"
        assert parsed.condition == rule
        assert parsed.logic == {"original": rule}
        assert parsed.parameters == {}

    def test_free_shipping_action(self):
        assert build_fallback_parsed_rule("Orders over $75 get free shipping").action == "apply_free_shipping"


class TestPrecheck:
    @pytest.mark.parametrize("rule", ["xyz", "  ab  ", "qwrtypl", "hello", "bcdf ghjk"])
    def test_rejected(self, rule):
        assert not precheck_rule(rule).is_valid

    def test_missing_condition_and_action(self):
        result = precheck_rule("The weather is nice today")
        assert not result.is_valid
        assert "complete business rule" in result.message

    def test_accepted(self):
        assert precheck_rule("If order is over $100, apply 10% discount").is_valid


class TestHeuristicRefinement:
    def test_classification(self):
        assert classify_rule("If order is above \$80, give a discount") == "order_discount"
        assert classify_rule("Discount every order on Fridays") == "order_discount_unquantified"
        assert classify_rule("Give a discount") == "generic"
        assert classify_rule("Low stock alert") == "inventory"
        assert classify_rule("VIP perks") == "customer"
        assert classify_rule("Send a weekly report") == "generic"

    def test_discount_rewrite_uses_rule_numbers(self):
        refinement = heuristic_refinement("If order is over $200, apply 5% discount")
        assert refinement.source == "fallback"
        assert refinement.isValid
        assert "$200" in refinement.improvedRule
        assert "5% discount" in refinement.improvedRule
        assert "$100" in refinement.improvedRule  # half the threshold as the cap
        assert "offline" in refinement.reasoning

    def test_order_discount_without_threshold_kept_as_written(self):
        rule = "Apply a 10% discount to every order on Black Friday"
        refinement = heuristic_refinement(rule)
        assert refinement.improvedRule == rule
        assert refinement.improvements == []
        assert refinement.source == "fallback"

    @pytest.mark.parametrize(
        "rule",
        ["Give VIP customers a 15% discount", "If customer buys 3 items, apply 10% discount"],
    )
    def test_discount_without_order_gets_no_subtotal_threshold(self, rule):
        improved = heuristic_refinement(rule).improvedRule
        assert "order subtotal" not in improved
        assert "$3 " not in improved
        assert "maximum discount of" not in improved


class TestRecommendationBuckets:
    @pytest.mark.parametrize(
        "rule,bucket",
        [
            ("Take 20 off for members", "discount"),
            ("Apply discount on Fridays", "discount"),
            ("If purchase exceeds $500, notify sales", "order"),
            ("Alert when stock is low", "inventory"),
            ("Send a thank-you email", "generic"),
            ("Trade-offs for official accounts", "generic"),
        ],
    )
    def test_bucket(self, rule, bucket):
        assert recommendation_bucket(rule) == bucket

    def test_every_bucket_has_five_entries(self):
        assert all(len(items) == 5 for items in RECOMMENDATION_BUCKETS.values())

    def test_fallback_marked(self):
        result = fallback_recommendations("Alert when stock is low")
        assert result.source == "fallback"
        assert result.recommendations == list(RECOMMENDATION_BUCKETS["inventory"])


class TestValidationShaping:
    def test_conservative_result(self):
        result = conservative_validation()
        assert result.valid
        assert result.conflicts == []
        assert result.suggestions == [DEGRADED_VALIDATION_SUGGESTION]

    def test_payload_normalization(self):
        result = validation_from_payload(
            {"valid": "no", "conflicts": ["Rule 1 vs Rule 2", 3, " "], "suggestions": "merge"}
        )
        assert result.conflicts == ["Rule 1 vs Rule 2"]
        assert result.suggestions == []
        assert result.valid is False

    def test_missing_valid_defaults_to_no_conflicts(self):
        assert validation_from_payload({"conflicts": []}).valid is True


class TestDeriveStatus:
    def test_error_when_conflicts(self):
        assert derive_status(ValidationResult(valid=True, conflicts=["clash"])) == "error"

    def test_warning_when_invalid_without_conflicts(self):
        assert derive_status(ValidationResult(valid=False)) == "warning"

    def test_valid(self):
        assert derive_status(ValidationResult(valid=True, suggestions=["tidy"])) == "valid"
