"""Recommendation engine: improvement suggestions for one rule."""

from __future__ import annotations

from typing import Sequence

from contracts.rule import RecommendationResult
from core.logging import get_agent_logger, preview
from helper.recommend import clean_recommendations, fallback_recommendations
from helper.sanitizer import decode_json_array
from templates.prompt import PromptTemplate
from templates.rule import RECOMMEND_TEMPLATE, format_existing_rules

from .llm import ModelGateway, complete_or_none

logger = get_agent_logger(__name__)


class RecommendationEngine:
    def __init__(self, gateway: ModelGateway, template: PromptTemplate = RECOMMEND_TEMPLATE) -> None:
        self.gateway = gateway
        self.template = template

    def recommend(self, rule: str, existing_rules: Sequence[str] = ()) -> RecommendationResult:
        """Always returns at least one recommendation.

        ``existing_rules`` is context for the model only; nothing is validated
        against it here.
        """
        text = (rule or "").strip()
        prompt = self.template.render(
            rule=text,
            existing_rules=format_existing_rules(list(existing_rules)),
        )
        raw = complete_or_none(self.gateway, prompt, stage="recommend", subject=text)
        if raw is None:
            return fallback_recommendations(text)

        decoded = decode_json_array(raw)
        if not decoded.ok:
            logger.warning("Recommend reply undecodable (%s) rule='%s'", decoded.error, preview(text))
            return fallback_recommendations(text)

        items = clean_recommendations(decoded.value)
        if not items:
            logger.warning("Recommend reply had no usable entries rule='%s'", preview(text))
            return fallback_recommendations(text)

        logger.info("Generated %s recommendation(s) via model rule='%s'", len(items), preview(text))
        return RecommendationResult(recommendations=items)
