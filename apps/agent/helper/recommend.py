"""Canned recommendation buckets used when the model gives nothing usable."""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from contracts.rule import RecommendationResult

_DISCOUNT_RE = re.compile(r"discount|\boff\b", re.IGNORECASE)
_ORDER_RE = re.compile(r"order|purchase", re.IGNORECASE)
_INVENTORY_RE = re.compile(r"inventory|stock", re.IGNORECASE)

RECOMMENDATION_BUCKETS: Dict[str, Tuple[str, ...]] = {
    "discount": (
        "Specify exact discount percentage and maximum amount",
        "Define which products are eligible for the discount",
        "Add customer eligibility criteria (new vs. returning)",
        "Set expiration date or usage limits",
        "Prevent stacking with other promotional offers",
    ),
    "order": (
        "Clarify if amount includes taxes and shipping",
        "Define minimum and maximum order thresholds",
        "Add geographic restrictions if applicable",
        "Specify which payment methods are accepted",
        "State how returns and cancellations affect the order total",
    ),
    "inventory": (
        "Set specific quantity thresholds for alerts",
        "Define reorder points and lead times",
        "Add seasonal adjustment factors",
        "Specify which staff should receive notifications",
        "Decide how often stock levels are checked",
    ),
    "generic": (
        "Add specific numerical thresholds instead of vague terms",
        "Define clear conditions and measurable criteria",
        "Specify exact actions with parameters",
        "Consider edge cases and exception scenarios",
        "Add time-based constraints if applicable",
    ),
}


def recommendation_bucket(rule: str) -> str:
    if _DISCOUNT_RE.search(rule):
        return "discount"
    if _ORDER_RE.search(rule):
        return "order"
    if _INVENTORY_RE.search(rule):
        return "inventory"
    return "generic"


def fallback_recommendations(rule: str) -> RecommendationResult:
    bucket = recommendation_bucket(rule)
    result = RecommendationResult(recommendations=list(RECOMMENDATION_BUCKETS[bucket]))
    result.mark("fallback")
    return result


def clean_recommendations(items: List[object]) -> List[str]:
    """Keep non-blank string entries, stripped, in model order."""
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]
