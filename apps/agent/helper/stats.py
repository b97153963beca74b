"""Collection analytics: counts by status and priority, success rate."""

from __future__ import annotations

import math
from collections import Counter
from typing import Sequence

from contracts.client_api import RulePriorityBreakdown, RuleStats, RuleStatusBreakdown
from contracts.common import PRIORITY_LABELS
from contracts.rule import Rule


def success_rate(valid: int, total: int) -> int:
    """Rounded percentage of valid rules (halves round up); 100 for no rules."""
    if total == 0:
        return 100
    return math.floor(valid * 100 / total + 0.5)


def compute_stats(rules: Sequence[Rule]) -> RuleStats:
    statuses = Counter(rule.status for rule in rules)
    priorities = Counter(PRIORITY_LABELS[rule.priority] for rule in rules)
    return RuleStats(
        total=len(rules),
        byStatus=RuleStatusBreakdown(**statuses),
        byPriority=RulePriorityBreakdown(**priorities),
        successRate=success_rate(statuses["valid"], len(rules)),
    )
