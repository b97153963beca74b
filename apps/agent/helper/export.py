"""Rule collection exports."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from contracts.client_api import RuleStats
from contracts.rule import Rule

CSV_HEADERS = [
    "ID",
    "Original Rule",
    "Priority",
    "Weight",
    "Status",
    "Suggestions Count",
    "Parsed Structure",
]

TRENDS_CSV_HEADERS = ["Date", "Total Rules", "Valid Rules", "Rules with Issues", "Success Rate"]

MEDIA_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def export_filename(fmt: str, today: Optional[datetime] = None, prefix: str = "business-rules") -> str:
    stamp = (today or _now()).date().isoformat()
    return f"{prefix}-{stamp}.{fmt}"


def rules_to_json(rules: Iterable[Rule]) -> str:
    return json.dumps([rule.model_dump(mode="json") for rule in rules], indent=2)


def rules_to_csv(rules: Iterable[Rule]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for rule in rules:
        writer.writerow(
            [
                rule.id,
                rule.original,
                rule.priority,
                rule.weight,
                rule.status,
                len(rule.suggestions),
                json.dumps(rule.parsed, separators=(",", ":")),
            ]
        )
    return buffer.getvalue()


def render_export(rules: Iterable[Rule], fmt: str) -> str:
    if fmt == "csv":
        return rules_to_csv(rules)
    if fmt == "json":
        return rules_to_json(rules)
    raise ValueError(f"unsupported export format: {fmt}")


def analytics_report(rules: Sequence[Rule], stats: RuleStats, generated_at: Optional[datetime] = None) -> str:
    report = {
        "generatedAt": (generated_at or _now()).isoformat(),
        "summary": {
            "totalRules": stats.total,
            "activeRules": stats.byStatus.valid,
            "rulesWithErrors": stats.byStatus.error,
            "rulesWithWarnings": stats.byStatus.warning,
            "successRate": f"{stats.successRate}%",
        },
        "ruleBreakdown": {
            "byPriority": stats.byPriority.model_dump(),
            "byStatus": stats.byStatus.model_dump(),
        },
        "rules": [
            {
                "id": rule.id,
                "original": rule.original,
                "priority": rule.priority,
                "weight": rule.weight,
                "status": rule.status,
                "suggestionsCount": len(rule.suggestions),
            }
            for rule in rules
        ],
    }
    return json.dumps(report, indent=2)


def trends_csv(stats: RuleStats, today: Optional[datetime] = None) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TRENDS_CSV_HEADERS)
    writer.writerow(
        [
            (today or _now()).date().isoformat(),
            stats.total,
            stats.byStatus.valid,
            stats.with_issues,
            f"{stats.successRate}%",
        ]
    )
    return buffer.getvalue()


def render_stats_export(rules: Sequence[Rule], stats: RuleStats, fmt: str, now: Optional[datetime] = None) -> str:
    if fmt == "csv":
        return trends_csv(stats, now)
    if fmt == "json":
        return analytics_report(rules, stats, now)
    raise ValueError(f"unsupported export format: {fmt}")


STATS_EXPORT_PREFIXES = {
    "json": "analytics-report",
    "csv": "trends-report",
}
