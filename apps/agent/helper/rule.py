"""Deterministic rule-text heuristics used when the model cannot parse a rule."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from contracts.rule import ParsedRule

Number = Union[int, float]

_PERCENT_DISCOUNT_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%\s*discount", re.IGNORECASE)
_DOLLAR_RE = re.compile(r"\$\s*(\d[\d,]*(?:\.\d+)?)")
_NUMBER_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)(\s*%)?")
_VIP_RE = re.compile(r"\bvip\b", re.IGNORECASE)
_OVER_RE = re.compile(r"\b(over|above)\b", re.IGNORECASE)
_BELOW_RE = re.compile(r"\b(below|under)\b", re.IGNORECASE)
_ALERT_RE = re.compile(r"\b(alert|notify)", re.IGNORECASE)


def to_number(raw: str) -> Number:
    """'1,000' -> 1000, '12.5' -> 12.5; integral values come back as int."""
    value = float(raw.replace(",", ""))
    return int(value) if value.is_integer() else value


@dataclass(frozen=True)
class RuleSignals:
    discount_percentage: Optional[Number] = None
    amount: Optional[Number] = None
    is_vip: bool = False
    has_over: bool = False
    has_below: bool = False


def first_amount(rule: str) -> Optional[Number]:
    """First dollar amount, else the first bare number that is not a percentage."""
    dollar = _DOLLAR_RE.search(rule)
    if dollar:
        return to_number(dollar.group(1))
    for match in _NUMBER_RE.finditer(rule):
        if match.group(2):
            continue
        return to_number(match.group(1))
    return None


def extract_rule_signals(rule: str) -> RuleSignals:
    discount = _PERCENT_DISCOUNT_RE.search(rule)
    return RuleSignals(
        discount_percentage=to_number(discount.group(1)) if discount else None,
        amount=first_amount(rule),
        is_vip=bool(_VIP_RE.search(rule)),
        has_over=bool(_OVER_RE.search(rule)),
        has_below=bool(_BELOW_RE.search(rule)),
    )


def _fallback_action(lower: str) -> str:
    if "discount" in lower:
        return "apply_discount"
    if _ALERT_RE.search(lower):
        return "send_alert"
    if "free shipping" in lower:
        return "apply_free_shipping"
    return "unknown"


def build_fallback_parsed_rule(rule: str) -> ParsedRule:
    """Build a ParsedRule from regex signals alone.

    Pure function of ``rule``: the same text always yields the same structure.
    """
    signals = extract_rule_signals(rule)
    action = _fallback_action(rule.lower())
    amount = signals.amount

    parameters: Dict[str, Any] = {}
    if action == "apply_discount" and signals.discount_percentage is not None:
        parameters["discount_percentage"] = signals.discount_percentage
    if amount is not None:
        parameters["threshold_amount"] = amount
    if signals.is_vip:
        parameters["customer_status"] = "VIP"

    then_value: Number = (
        signals.discount_percentage / 100 if signals.discount_percentage is not None else 1
    )
    then = {"action": action, "value": then_value}

    condition = rule
    logic: Dict[str, Any] = {"original": rule}
    if amount is not None and signals.has_over:
        over = {"field": "order_value", "operator": ">", "value": amount}
        if signals.is_vip:
            condition = f"customer_status == 'VIP' AND order_value > {amount}"
            vip = {"field": "customer_status", "operator": "==", "value": "VIP"}
            logic = {"if": {"and": [vip, over]}, "then": then}
        else:
            condition = f"order_value > {amount}"
            logic = {"if": over, "then": then}
    elif amount is not None and signals.has_below:
        condition = f"inventory_count < {amount}"
        logic = {
            "if": {"field": "inventory_count", "operator": "<", "value": amount},
            "then": then,
        }

    parsed = ParsedRule(
        condition=condition,
        action=action,
        parameters=parameters,
        logic=logic,
    )
    parsed.mark("fallback")
    return parsed
