"""RuleIntelligence: the rule pipeline boundary used by routes and services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from contracts.agent_api import AgentConnectionResponse
from contracts.common import RuleStatus
from contracts.rule import (
    ModificationResult,
    ParsedRule,
    RecommendationResult,
    RuleRefinement,
    ValidationResult,
)
from core.errors import ModelGatewayError
from core.logging import get_agent_logger, preview
from templates.rule import CONNECTION_TEMPLATE

from .analysis_graph import Ticket, build_analysis_graph
from .llm import ChatModelGateway, ModelGateway
from .modifier import RuleModifier
from .parser import RuleParser
from .recommender import RecommendationEngine
from .refiner import RuleRefiner
from .validator import CrossRuleValidator

logger = get_agent_logger(__name__)


@dataclass
class AnalysisResult:
    parsed: ParsedRule
    recommendations: RecommendationResult
    validation: ValidationResult
    status: RuleStatus
    refinement: Optional[RuleRefinement] = None
    superseded: bool = False

    @property
    def suggestions(self) -> List[str]:
        return list(self.recommendations.recommendations)


class RuleIntelligence:
    """Parse, refine, recommend, validate and modify business rules.

    None of the stage methods raise on model trouble; inspect ``.source`` on a
    result to see whether it came from the model or a fallback.
    """

    def __init__(self, gateway: Optional[ModelGateway] = None) -> None:
        self.gateway: ModelGateway = gateway if gateway is not None else ChatModelGateway()
        self.parser = RuleParser(self.gateway)
        self.refiner = RuleRefiner(self.gateway)
        self.recommender = RecommendationEngine(self.gateway)
        self.validator = CrossRuleValidator(self.gateway)
        self.modifier = RuleModifier(self.gateway)
        logger.debug("RuleIntelligence initialized gateway=%s", type(self.gateway).__name__)

    # ------------------------------------------------------------------
    # Single stages
    # ------------------------------------------------------------------
    def parse(self, rule: str) -> ParsedRule:
        return self.parser.parse(rule)

    def refine(self, rule: str) -> RuleRefinement:
        return self.refiner.refine(rule)

    def recommend(self, rule: str, existing_rules: Sequence[str] = ()) -> RecommendationResult:
        return self.recommender.recommend(rule, existing_rules)

    def validate(self, rules: Sequence[str]) -> ValidationResult:
        return self.validator.validate(rules)

    def modify(self, instruction: str, current_rule: str) -> ModificationResult:
        return self.modifier.modify(instruction, current_rule)

    # ------------------------------------------------------------------
    # Combined analysis
    # ------------------------------------------------------------------
    def analyze(
        self,
        rule: str,
        existing_rules: Sequence[str] = (),
        rule_set: Optional[Sequence[str]] = None,
        *,
        ticket: Optional[Ticket] = None,
        include_refinement: bool = False,
    ) -> AnalysisResult:
        """Run parse, recommend and validate concurrently and derive the status.

        ``rule_set`` is the full ordered list to validate; by default the rule
        is appended after ``existing_rules``.
        """
        text = rule.strip()
        siblings = list(existing_rules)
        merged = list(rule_set) if rule_set is not None else [*siblings, text]
        logger.info(
            "Analyzing rule siblings=%s rule_set=%s refine=%s rule='%s'",
            len(siblings),
            len(merged),
            include_refinement,
            preview(text),
        )

        graph = build_analysis_graph(
            self.parser,
            self.recommender,
            self.validator,
            self.refiner if include_refinement else None,
        )
        app = graph.compile()
        state = app.invoke(
            {
                "rule": text,
                "existing_rules": siblings,
                "rule_set": merged,
                "ticket": ticket,
            }
        )
        return AnalysisResult(
            parsed=state["parsed"],
            recommendations=state["recommendations"],
            validation=state["validation"],
            status=state["status"],
            refinement=state.get("refinement"),
            superseded=bool(state.get("superseded")),
        )

    # ------------------------------------------------------------------
    # Connectivity check
    # ------------------------------------------------------------------
    def check_connection(self) -> AgentConnectionResponse:
        model = getattr(self.gateway, "model_name", None)
        try:
            reply = self.gateway.complete(CONNECTION_TEMPLATE.render())
        except ModelGatewayError as exc:
            logger.warning("Model connection check failed: %s", exc)
            return AgentConnectionResponse(success=False, model=model, error=str(exc))
        except Exception as exc:
            logger.exception("Model connection check raised unexpectedly")
            return AgentConnectionResponse(success=False, model=model, error=str(exc))
        return AgentConnectionResponse(success=True, response=reply.strip(), model=model)
