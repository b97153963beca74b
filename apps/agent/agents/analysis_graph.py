"""LangGraph wiring for full rule analysis."""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, TypedDict

from langgraph.graph import END, START, StateGraph

from contracts.rule import ParsedRule, RecommendationResult, RuleRefinement, ValidationResult
from core.logging import get_agent_logger
from helper.validation import derive_status

from .parser import RuleParser
from .recommender import RecommendationEngine
from .refiner import RuleRefiner
from .validator import CrossRuleValidator

logger = get_agent_logger(__name__)


class Ticket(Protocol):
    def is_current(self) -> bool:
        ...


class AnalysisState(TypedDict, total=False):
    rule: str
    existing_rules: List[str]
    rule_set: List[str]
    ticket: Optional[Any]
    parsed: ParsedRule
    recommendations: RecommendationResult
    validation: ValidationResult
    refinement: RuleRefinement
    status: str
    superseded: bool


def build_analysis_graph(
    parser: RuleParser,
    recommender: RecommendationEngine,
    validator: CrossRuleValidator,
    refiner: Optional[RuleRefiner] = None,
) -> StateGraph:
    """Fan out parse/recommend/validate (and optionally refine), join on status.

    Nodes in the same superstep run concurrently; ``status`` waits for both
    ``recommend`` and ``validate``.
    """
    logger.debug("Building analysis graph refine=%s", refiner is not None)

    def parse_node(state: AnalysisState) -> AnalysisState:
        return {"parsed": parser.parse(state["rule"])}

    def recommend_node(state: AnalysisState) -> AnalysisState:
        return {"recommendations": recommender.recommend(state["rule"], state.get("existing_rules") or [])}

    def validate_node(state: AnalysisState) -> AnalysisState:
        return {"validation": validator.validate(state.get("rule_set") or [])}

    def refine_node(state: AnalysisState) -> AnalysisState:
        return {"refinement": refiner.refine(state["rule"])}

    def status_node(state: AnalysisState) -> AnalysisState:
        ticket = state.get("ticket")
        superseded = ticket is not None and not ticket.is_current()
        status = derive_status(state["validation"])
        if superseded:
            logger.info("Analysis superseded before status derivation status=%s", status)
        else:
            logger.debug("Analysis status derived status=%s", status)
        return {"status": status, "superseded": superseded}

    graph = StateGraph(AnalysisState)
    graph.add_node("parse", parse_node)
    graph.add_node("recommend", recommend_node)
    graph.add_node("validate", validate_node)
    graph.add_node("status", status_node)

    graph.add_edge(START, "parse")
    graph.add_edge(START, "recommend")
    graph.add_edge(START, "validate")
    graph.add_edge(["recommend", "validate"], "status")
    graph.add_edge("parse", END)
    graph.add_edge("status", END)

    if refiner is not None:
        graph.add_node("refine", refine_node)
        graph.add_edge(START, "refine")
        graph.add_edge("refine", END)
    return graph
