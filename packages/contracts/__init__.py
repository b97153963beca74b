"""
Shared contracts for the rule agent and its HTTP surface.

Usage:
    from contracts.rule import Rule, ParsedRule, RuleRefinement, ValidationResult
    from contracts.agent_api import AgentParseRequest, AgentValidateResponse
    from contracts.client_api import RuleCreatePayload, RuleUpdatePayload
    from contracts.version import CONTRACT_VERSION
"""
from .version import CONTRACT_VERSION

__all__ = ["CONTRACT_VERSION"]
