from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from agents.intelligence import RuleIntelligence
from contracts.agent_api import (
    AgentAnalyzeRequest,
    AgentAnalyzeResponse,
    AgentModifyRequest,
    AgentModifyResponse,
    AgentParseRequest,
    AgentParseResponse,
    AgentConnectionResponse,
    AgentRecommendRequest,
    AgentRecommendResponse,
    AgentRefineRequest,
    AgentRefineResponse,
    AgentValidateRequest,
    AgentValidateResponse,
)
from core.logging import get_agent_logger, preview

from .deps import get_intelligence

router = APIRouter(prefix="/agent", tags=["ai"])

logger = get_agent_logger(__name__)


def _require_rule(rule: str, request_id: Optional[str]) -> str:
    text = (rule or "").strip()
    if not text:
        logger.warning("Missing rule text request_id=%s", request_id)
        raise HTTPException(status_code=400, detail="RULE_REQUIRED")
    return text


@router.post("/ai/parse", response_model=AgentParseResponse)
def parse_rule(
    payload: AgentParseRequest,
    intelligence: RuleIntelligence = Depends(get_intelligence),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> AgentParseResponse:
    text = _require_rule(payload.rule, x_request_id)
    logger.info("Parse request request_id=%s rule='%s'", x_request_id, preview(text))
    parsed = intelligence.parse(text)
    return AgentParseResponse(parsed=parsed.model_dump(), source=parsed.source)


@router.post("/ai/refine", response_model=AgentRefineResponse)
def refine_rule(
    payload: AgentRefineRequest,
    intelligence: RuleIntelligence = Depends(get_intelligence),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> AgentRefineResponse:
    text = _require_rule(payload.rule, x_request_id)
    logger.info("Refine request request_id=%s rule='%s'", x_request_id, preview(text))
    refinement = intelligence.refine(text)
    return AgentRefineResponse(refinement=refinement, source=refinement.source)


@router.post("/ai/recommend", response_model=AgentRecommendResponse)
def recommend(
    payload: AgentRecommendRequest,
    intelligence: RuleIntelligence = Depends(get_intelligence),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> AgentRecommendResponse:
    text = _require_rule(payload.rule, x_request_id)
    logger.info(
        "Recommend request request_id=%s existing=%s rule='%s'",
        x_request_id,
        len(payload.existingRules),
        preview(text),
    )
    result = intelligence.recommend(text, payload.existingRules)
    return AgentRecommendResponse(recommendations=result.recommendations, source=result.source)


@router.post("/ai/validate", response_model=AgentValidateResponse)
def validate_rules(
    payload: AgentValidateRequest,
    intelligence: RuleIntelligence = Depends(get_intelligence),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> AgentValidateResponse:
    logger.info("Validate request request_id=%s rules=%s", x_request_id, len(payload.rules))
    result = intelligence.validate(payload.rules)
    return AgentValidateResponse(
        valid=result.valid,
        conflicts=result.conflicts,
        suggestions=result.suggestions,
        source=result.source,
    )


@router.post("/ai/analyze", response_model=AgentAnalyzeResponse)
def analyze_rule(
    payload: AgentAnalyzeRequest,
    intelligence: RuleIntelligence = Depends(get_intelligence),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> AgentAnalyzeResponse:
    text = _require_rule(payload.rule, x_request_id)
    result = intelligence.analyze(
        text,
        payload.existingRules,
        include_refinement=payload.includeRefinement,
    )
    logger.info(
        "Analyze request request_id=%s status=%s parse=%s recommend=%s validate=%s",
        x_request_id,
        result.status,
        result.parsed.source,
        result.recommendations.source,
        result.validation.source,
    )
    return AgentAnalyzeResponse(
        parsed=result.parsed.model_dump(),
        parseSource=result.parsed.source,
        recommendations=result.suggestions,
        recommendationSource=result.recommendations.source,
        validation=result.validation,
        validationSource=result.validation.source,
        status=result.status,
        refinement=result.refinement,
    )


@router.post("/modify", response_model=AgentModifyResponse)
def modify_rule(
    payload: AgentModifyRequest,
    intelligence: RuleIntelligence = Depends(get_intelligence),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> AgentModifyResponse:
    instruction = (payload.instruction or "").strip()
    if not instruction:
        logger.warning("Missing modify instruction request_id=%s", x_request_id)
        raise HTTPException(status_code=400, detail="INSTRUCTION_REQUIRED")
    current = _require_rule(payload.currentRule, x_request_id)
    logger.info(
        "Modify request request_id=%s instruction='%s' rule='%s'",
        x_request_id,
        preview(instruction),
        preview(current),
    )
    result = intelligence.modify(instruction, current)
    return AgentModifyResponse(modifiedRule=result.modifiedRule, source=result.source)


@router.get("/ai/test-connection", response_model=AgentConnectionResponse)
def check_connection(intelligence: RuleIntelligence = Depends(get_intelligence)) -> AgentConnectionResponse:
    return intelligence.check_connection()
