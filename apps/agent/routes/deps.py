from fastapi import Request

from agents.intelligence import RuleIntelligence
from services.rule_service import RuleService


def get_intelligence(request: Request) -> RuleIntelligence:
    return request.app.state.intelligence


def get_rule_service(request: Request) -> RuleService:
    return request.app.state.rule_service
