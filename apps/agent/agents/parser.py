"""Rule parser: free text -> ParsedRule."""

from __future__ import annotations

from pydantic import ValidationError

from contracts.rule import ParsedRule
from core.logging import get_agent_logger, preview
from helper.rule import build_fallback_parsed_rule
from helper.sanitizer import decode_json_object
from templates.prompt import PromptTemplate
from templates.rule import PARSE_TEMPLATE

from .llm import ModelGateway, complete_or_none

logger = get_agent_logger(__name__)


class RuleParser:
    def __init__(self, gateway: ModelGateway, template: PromptTemplate = PARSE_TEMPLATE) -> None:
        self.gateway = gateway
        self.template = template

    def parse(self, rule: str) -> ParsedRule:
        """Return the model's structure as-is, or the regex fallback.

        ``rule`` must be non-empty; rejecting blank input is the caller's job.
        """
        text = rule.strip()
        raw = complete_or_none(
            self.gateway, self.template.render(rule=text), stage="parse", subject=text
        )
        if raw is None:
            return build_fallback_parsed_rule(text)

        decoded = decode_json_object(raw)
        if not decoded.ok:
            logger.warning("Parse reply undecodable (%s) rule='%s'", decoded.error, preview(text))
            return build_fallback_parsed_rule(text)

        try:
            parsed = ParsedRule.model_validate(decoded.value)
        except ValidationError as exc:
            logger.warning(
                "Parse reply has wrong field types (%s error(s)) rule='%s'",
                exc.error_count(),
                preview(text),
            )
            return build_fallback_parsed_rule(text)

        logger.info("Parsed rule via model action=%s rule='%s'", parsed.action, preview(text))
        return parsed
