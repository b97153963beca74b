"""Validation result shaping and rule status derivation."""

from __future__ import annotations

from typing import Any, Dict

from contracts.common import RuleStatus
from contracts.rule import ValidationResult

DEGRADED_VALIDATION_SUGGESTION = (
    "AI validation temporarily unavailable - manual review recommended"
)


def empty_validation() -> ValidationResult:
    result = ValidationResult(valid=True, conflicts=[], suggestions=[])
    result.mark("trivial")
    return result


def conservative_validation() -> ValidationResult:
    """Assume the rule set is valid rather than block on a missing validator."""
    result = ValidationResult(
        valid=True,
        conflicts=[],
        suggestions=[DEGRADED_VALIDATION_SUGGESTION],
    )
    result.mark("fallback")
    return result


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def validation_from_payload(payload: Dict[str, Any]) -> ValidationResult:
    """Normalize a decoded model reply into a ValidationResult."""
    conflicts = _strings(payload.get("conflicts"))
    suggestions = _strings(payload.get("suggestions"))
    raw_valid = payload.get("valid")
    valid = raw_valid if isinstance(raw_valid, bool) else not conflicts
    return ValidationResult(valid=valid, conflicts=conflicts, suggestions=suggestions)


def derive_status(validation: ValidationResult) -> RuleStatus:
    """conflicts -> error, otherwise invalid -> warning, otherwise valid."""
    if validation.conflicts:
        return "error"
    if not validation.valid:
        return "warning"
    return "valid"
