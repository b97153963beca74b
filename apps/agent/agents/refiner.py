"""Rule refiner: local pre-check, then a model rewrite with heuristic fallback."""

from __future__ import annotations

from contracts.rule import RuleRefinement
from core.logging import get_agent_logger, preview
from helper.refine import heuristic_refinement, precheck_rule, rejected_refinement
from helper.sanitizer import decode_json_object
from templates.prompt import PromptTemplate
from templates.rule import REFINE_TEMPLATE

from .llm import ModelGateway, complete_or_none

logger = get_agent_logger(__name__)

_DEFAULT_REASONING = "AI provided refinement suggestions"


class RuleRefiner:
    def __init__(self, gateway: ModelGateway, template: PromptTemplate = REFINE_TEMPLATE) -> None:
        self.gateway = gateway
        self.template = template

    def refine(self, rule: str) -> RuleRefinement:
        text = (rule or "").strip()
        check = precheck_rule(text)
        if not check.is_valid:
            logger.info("Refine pre-check rejected rule='%s' reason=%s", preview(text), check.message)
            return rejected_refinement(text, check.message or "")

        raw = complete_or_none(
            self.gateway, self.template.render(rule=text), stage="refine", subject=text
        )
        if raw is None:
            return heuristic_refinement(text)

        decoded = decode_json_object(raw)
        if not decoded.ok:
            logger.warning("Refine reply undecodable (%s) rule='%s'", decoded.error, preview(text))
            return heuristic_refinement(text)

        payload = decoded.value
        improved = payload.get("improvedRule")
        improvements = payload.get("improvements")
        reasoning = payload.get("reasoning")
        if not isinstance(improvements, list):
            improvements = []

        refinement = RuleRefinement(
            originalRule=text,
            improvedRule=improved if isinstance(improved, str) and improved.strip() else text,
            improvements=[item for item in improvements if isinstance(item, str)],
            reasoning=reasoning if isinstance(reasoning, str) and reasoning.strip() else _DEFAULT_REASONING,
            isValid=True,
        )
        logger.info(
            "Refined rule via model improvements=%s rule='%s'",
            len(refinement.improvements),
            preview(text),
        )
        return refinement
