"""Rule modifier: apply a free-form edit instruction to a rule text."""

from __future__ import annotations

from contracts.rule import ModificationResult
from core.logging import get_agent_logger, preview
from helper.sanitizer import strip_code_fences
from templates.prompt import PromptTemplate
from templates.rule import MODIFY_TEMPLATE

from .llm import ModelGateway, complete_or_none

logger = get_agent_logger(__name__)


class RuleModifier:
    def __init__(self, gateway: ModelGateway, template: PromptTemplate = MODIFY_TEMPLATE) -> None:
        self.gateway = gateway
        self.template = template

    def modify(self, instruction: str, current_rule: str) -> ModificationResult:
        prompt = self.template.render(instruction=instruction.strip(), rule=current_rule)
        raw = complete_or_none(self.gateway, prompt, stage="modify", subject=current_rule)
        modified = strip_code_fences(raw) if raw is not None else ""
        if not modified:
            unchanged = ModificationResult(modifiedRule=current_rule)
            unchanged.mark("fallback")
            return unchanged

        logger.info("Modified rule via model rule='%s' -> '%s'", preview(current_rule), preview(modified))
        return ModificationResult(modifiedRule=modified)
