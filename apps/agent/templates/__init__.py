"""Template exports for agent workflows."""

from typing import Dict

from .prompt import Prompt, PromptTemplate
from .rule import (
    MODIFY_TEMPLATE,
    PARSE_TEMPLATE,
    CONNECTION_TEMPLATE,
    PROJECT_CONTEXT,
    RECOMMEND_TEMPLATE,
    REFINE_TEMPLATE,
    VALIDATE_TEMPLATE,
    enumerate_rules,
    format_existing_rules,
)


def get_templates() -> Dict[str, PromptTemplate]:
    """Return the active prompt template per pipeline stage."""
    return {
        template.name: template
        for template in (
            PARSE_TEMPLATE,
            REFINE_TEMPLATE,
            RECOMMEND_TEMPLATE,
            VALIDATE_TEMPLATE,
            MODIFY_TEMPLATE,
            CONNECTION_TEMPLATE,
        )
    }


__all__ = [
    "get_templates",
    "Prompt",
    "PromptTemplate",
    "PROJECT_CONTEXT",
    "PARSE_TEMPLATE",
    "REFINE_TEMPLATE",
    "RECOMMEND_TEMPLATE",
    "VALIDATE_TEMPLATE",
    "MODIFY_TEMPLATE",
    "CONNECTION_TEMPLATE",
    "enumerate_rules",
    "format_existing_rules",
]
