"""Rule collection orchestration: store writes enriched by the analysis pipeline."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from agents.intelligence import AnalysisResult, RuleIntelligence
from contracts.client_api import RuleStats
from contracts.rule import Rule
from core.errors import AnalysisSupersededError
from core.logging import get_agent_logger, preview
from helper.export import render_export, render_stats_export
from helper.stats import compute_stats

from .generations import GenerationTracker
from .rule_store import RuleStore

logger = get_agent_logger(__name__)


def _enrichment(result: AnalysisResult) -> dict:
    return {
        "parsed": result.parsed.model_dump(),
        "status": result.status,
        "suggestions": result.suggestions,
    }


class RuleService:
    """Create, edit, revalidate and delete rules.

    Text edits and revalidations take a ticket from the tracker before the
    pipeline runs; a result whose ticket is no longer the latest for its rule
    is dropped and ``AnalysisSupersededError`` is raised instead of writing.
    """

    def __init__(
        self,
        store: RuleStore,
        intelligence: RuleIntelligence,
        tracker: Optional[GenerationTracker] = None,
    ) -> None:
        self.store = store
        self.intelligence = intelligence
        self.tracker = tracker or GenerationTracker()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_rules(
        self,
        search: Optional[str] = None,
        priority: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[Rule]:
        rules = self.store.list()
        if search:
            needle = search.lower()
            rules = [
                rule
                for rule in rules
                if needle in rule.original.lower() or needle in str(rule.parsed).lower()
            ]
        if priority is not None:
            rules = [rule for rule in rules if rule.priority == priority]
        if status:
            rules = [rule for rule in rules if rule.status == status]
        return rules

    def get_rule(self, rule_id: str) -> Rule:
        return self.store.require(rule_id)

    def export(self, fmt: str) -> str:
        rules = self.store.list()
        logger.info("Exporting rules format=%s count=%s", fmt, len(rules))
        return render_export(rules, fmt)

    def stats(self) -> RuleStats:
        return compute_stats(self.store.list())

    def export_stats(self, fmt: str) -> str:
        rules = self.store.list()
        stats = compute_stats(rules)
        logger.info("Exporting analytics format=%s total=%s success_rate=%s", fmt, stats.total, stats.successRate)
        return render_stats_export(rules, stats, fmt)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_rule(self, original: str, priority: int = 1, weight: float = 1.0) -> Rule:
        text = original.strip()
        siblings = self.store.texts()
        result = self.intelligence.analyze(text, siblings)
        rule = self.store.create(text, priority=priority, weight=weight, **_enrichment(result))
        logger.info(
            "Rule created id=%s status=%s suggestions=%s rule='%s'",
            rule.id,
            rule.status,
            len(rule.suggestions),
            preview(text),
        )
        return rule

    def update_rule(
        self,
        rule_id: str,
        original: Optional[str] = None,
        priority: Optional[int] = None,
        weight: Optional[float] = None,
    ) -> Rule:
        current = self.store.require(rule_id)
        text = original.strip() if original is not None else None
        if text is None or text == current.original:
            return self.store.update(rule_id, priority=priority, weight=weight)

        return self._analyze_in_place(rule_id, text, original=text, priority=priority, weight=weight)

    def revalidate(self, rule_id: str) -> Rule:
        current = self.store.require(rule_id)
        return self._analyze_in_place(rule_id, current.original)

    def delete_rule(self, rule_id: str) -> None:
        self.store.delete(rule_id)
        self.tracker.forget(rule_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _rule_set(self, rule_id: str, text: str) -> Tuple[List[str], List[str]]:
        """Return (siblings, merged) with ``text`` at the rule's own position."""
        siblings: List[str] = []
        merged: List[str] = []
        for rule in self.store.list():
            if rule.id == rule_id:
                merged.append(text)
            else:
                siblings.append(rule.original)
                merged.append(rule.original)
        return siblings, merged

    def _analyze_in_place(self, rule_id: str, text: str, **changes: Any) -> Rule:
        """Analyze ``text`` at the rule's position and write it if still current.

        The ticket check and the store write happen as one step, so a newer
        submission can never be overwritten by an older one that finished late.
        """
        ticket = self.tracker.issue(rule_id)
        siblings, merged = self._rule_set(rule_id, text)
        result = self.intelligence.analyze(text, siblings, merged, ticket=ticket)
        try:
            return ticket.commit(lambda: self.store.update(rule_id, **changes, **_enrichment(result)))
        except AnalysisSupersededError as exc:
            logger.info(
                "Discarding stale analysis rule_id=%s generation=%s latest=%s status=%s",
                rule_id,
                exc.generation,
                exc.latest,
                result.status,
            )
            raise


__all__ = ["RuleService"]
