"""Cross-rule validator: conflicts and ambiguities across the whole rule set."""

from __future__ import annotations

from typing import Sequence

from contracts.rule import ValidationResult
from core.logging import get_agent_logger
from helper.sanitizer import decode_json_object
from helper.validation import conservative_validation, empty_validation, validation_from_payload
from templates.prompt import PromptTemplate
from templates.rule import VALIDATE_TEMPLATE, enumerate_rules

from .llm import ModelGateway, complete_or_none

logger = get_agent_logger(__name__)


class CrossRuleValidator:
    def __init__(self, gateway: ModelGateway, template: PromptTemplate = VALIDATE_TEMPLATE) -> None:
        self.gateway = gateway
        self.template = template

    def validate(self, rules: Sequence[str]) -> ValidationResult:
        """Validate the ordered rule set.

        Never reports conflicts it could not check: when the model is down or
        its reply is unusable the set is assumed valid and a single advisory
        suggestion says so.
        """
        rule_list = list(rules)
        if not rule_list:
            return empty_validation()

        raw = complete_or_none(
            self.gateway,
            self.template.render(rules=enumerate_rules(rule_list)),
            stage="validate",
            subject=f"{len(rule_list)} rule(s)",
        )
        if raw is None:
            return conservative_validation()

        decoded = decode_json_object(raw)
        if not decoded.ok:
            logger.warning("Validate reply undecodable (%s) rules=%s", decoded.error, len(rule_list))
            return conservative_validation()

        result = validation_from_payload(decoded.value)
        logger.info(
            "Validated %s rule(s) via model valid=%s conflicts=%s",
            len(rule_list),
            result.valid,
            len(result.conflicts),
        )
        return result
