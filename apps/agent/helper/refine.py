"""Local pre-check and offline rewrite for rule refinement."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from contracts.rule import RuleRefinement

from helper.rule import Number, extract_rule_signals

MIN_RULE_LENGTH = 5

MESSAGE_TOO_SHORT = "Rule is too short to be meaningful. Please provide more details."
MESSAGE_GIBBERISH = (
    "This appears to be gibberish. Please enter a meaningful business rule like "
    "\"If order value is over $100, apply 10% discount\"."
)
MESSAGE_INCOMPLETE = (
    "This doesn't appear to be a complete business rule. Please include a condition "
    "(if/when) and an action (then/apply/give). Example: \"If customer is VIP, then "
    "apply 15% discount\"."
)

FALLBACK_REASONING = (
    "Refined with offline business-rule heuristics because the AI service was "
    "unavailable. Connect the AI service for context-aware refinements."
)

_CONDITION_RE = re.compile(r"\b(if|when|whenever|once|after|before)\b", re.IGNORECASE)
_ACTION_RE = re.compile(
    r"\b(then|apply|give|send|set|create|update|notify|alert|discount|charge)\b",
    re.IGNORECASE,
)
_CONSONANTS_RE = re.compile(r"^[bcdfghjklmnpqrstvwxyz]{4,}$", re.IGNORECASE)
_SINGLE_WORD_RE = re.compile(r"^[a-z]+$", re.IGNORECASE)
_THRESHOLD_RE = re.compile(r"\b(over|above)\b", re.IGNORECASE)


@dataclass(frozen=True)
class PrecheckResult:
    is_valid: bool
    message: Optional[str] = None


def precheck_rule(rule: str) -> PrecheckResult:
    """Reject text that is clearly not a business rule, without calling a model."""
    text = (rule or "").strip()
    if len(text) < MIN_RULE_LENGTH:
        return PrecheckResult(False, MESSAGE_TOO_SHORT)

    compact = re.sub(r"\s+", "", text)
    if _CONSONANTS_RE.match(compact) or _SINGLE_WORD_RE.match(text):
        return PrecheckResult(False, MESSAGE_GIBBERISH)

    if not _CONDITION_RE.search(text) and not _ACTION_RE.search(text):
        return PrecheckResult(False, MESSAGE_INCOMPLETE)

    return PrecheckResult(True)


def rejected_refinement(rule: str, message: str) -> RuleRefinement:
    refinement = RuleRefinement(
        originalRule=rule,
        improvedRule=rule,
        improvements=[],
        reasoning=message,
        isValid=False,
        validationMessage=message,
    )
    refinement.mark("precheck")
    return refinement


def _money(value: Number) -> str:
    return f"{value:,}" if isinstance(value, int) else f"{value:,.2f}"


def classify_rule(rule: str) -> str:
    """Keyword family used to pick an offline rewrite.

    Only order discounts with an over/above threshold get the subtotal rewrite;
    other order discounts are left as written rather than given a made-up
    threshold.
    """
    lower = rule.lower()
    if "order" in lower and "discount" in lower:
        return "order_discount" if _THRESHOLD_RE.search(lower) else "order_discount_unquantified"
    if "inventory" in lower or "stock" in lower:
        return "inventory"
    if "customer" in lower or "vip" in lower:
        return "customer"
    return "generic"


def heuristic_refinement(rule: str) -> RuleRefinement:
    family = classify_rule(rule)
    signals = extract_rule_signals(rule)
    improvements: List[str]

    if family == "order_discount":
        amount = signals.amount if signals.amount is not None else 100
        percentage = signals.discount_percentage if signals.discount_percentage is not None else 10
        cap = int(amount * 0.5)
        improved = (
            f"If order subtotal exceeds ${_money(amount)} (excluding taxes and shipping), "
            f"apply a {percentage}% discount to eligible regular-priced items, "
            f"with a maximum discount of ${_money(cap)} per order"
        )
        improvements = [
            f"Specified exact monetary threshold (${_money(amount)}) instead of vague terms",
            "Clarified calculation basis (subtotal excluding taxes/shipping)",
            "Added eligibility constraints (regular-priced items only)",
            "Set maximum discount limit to prevent excessive discounts",
            "Made the rule implementation-ready with clear parameters",
        ]
    elif family == "order_discount_unquantified":
        improved = rule
        improvements = []
    elif family == "inventory":
        units = signals.amount if signals.amount is not None else 10
        improved = (
            f"When inventory level for any product falls below {units} units, automatically "
            "send email alerts to inventory managers and create a reorder notification in the system"
        )
        improvements = [
            f"Specified exact quantity threshold ({units} units)",
            "Defined clear actions (email alerts + system notifications)",
            "Identified target recipients (inventory managers)",
            "Made the rule actionable and measurable",
        ]
    elif family == "customer":
        improved = (
            "For customers with lifetime purchase value exceeding $1,000 or 5+ orders in the "
            "past year, apply VIP status with 15% discount on all regular-priced items and free shipping"
        )
        improvements = [
            "Defined specific VIP criteria (purchase value + order frequency)",
            "Specified exact benefits (15% discount + free shipping)",
            "Added eligibility constraints (regular-priced items)",
            "Created measurable conditions for automation",
        ]
    else:
        improved = (
            f"{rule} [Enhanced: add specific thresholds, clear conditions, exact actions, "
            "and measurable parameters]"
        )
        improvements = [
            "Add specific numerical thresholds instead of vague terms",
            "Define clear conditions with measurable criteria",
            "Specify exact actions with concrete parameters",
            "Include business constraints and exception handling",
            "Ensure the rule is implementation-ready",
        ]

    refinement = RuleRefinement(
        originalRule=rule,
        improvedRule=improved,
        improvements=improvements,
        reasoning=FALLBACK_REASONING,
        isValid=True,
    )
    refinement.mark("fallback")
    return refinement
