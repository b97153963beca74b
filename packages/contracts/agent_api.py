from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from .common import HealthResponse, ResultSource, RuleStatus
from .rule import RuleRefinement, ValidationResult

# ==============================================================================
# /agent/ai/parse  (free text -> structured rule)
# ==============================================================================

class AgentParseRequest(BaseModel):
    rule: str

class AgentParseResponse(BaseModel):
    parsed: Dict[str, Any]
    source: ResultSource

# ==============================================================================
# /agent/ai/refine  (pre-check + improved wording)
# ==============================================================================

class AgentRefineRequest(BaseModel):
    rule: str

class AgentRefineResponse(BaseModel):
    refinement: RuleRefinement
    source: ResultSource

# ==============================================================================
# /agent/ai/recommend  (suggestions in the context of sibling rules)
# ==============================================================================

class AgentRecommendRequest(BaseModel):
    rule: str
    existingRules: List[str] = Field(default_factory=list)

class AgentRecommendResponse(BaseModel):
    recommendations: List[str]
    source: ResultSource

# ==============================================================================
# /agent/ai/validate  (cross-rule conflicts)
# ==============================================================================

class AgentValidateRequest(BaseModel):
    rules: List[str]

class AgentValidateResponse(BaseModel):
    valid: bool
    conflicts: List[str]
    suggestions: List[str]
    source: ResultSource

# ==============================================================================
# /agent/ai/analyze  (parse + recommend + validate in one round trip)
# ==============================================================================

class AgentAnalyzeRequest(BaseModel):
    rule: str
    existingRules: List[str] = Field(default_factory=list)
    includeRefinement: bool = False

class AgentAnalyzeResponse(BaseModel):
    parsed: Dict[str, Any]
    parseSource: ResultSource
    recommendations: List[str]
    recommendationSource: ResultSource
    validation: ValidationResult
    validationSource: ResultSource
    status: RuleStatus
    refinement: Optional[RuleRefinement] = None

# ==============================================================================
# /agent/modify  (instruction-driven rewrite)
# ==============================================================================

class AgentModifyRequest(BaseModel):
    instruction: str
    currentRule: str

class AgentModifyResponse(BaseModel):
    modifiedRule: str
    source: ResultSource

# ==============================================================================
# /agent/ai/test-connection  (model connectivity check)
# ==============================================================================

class AgentConnectionResponse(BaseModel):
    success: bool
    response: Optional[str] = None
    model: Optional[str] = None
    error: Optional[str] = None

# ==============================================================================
# /agent/health
# ==============================================================================

AgentHealthResponse = HealthResponse

__all__ = [
    # parse
    "AgentParseRequest",
    "AgentParseResponse",
    # refine
    "AgentRefineRequest",
    "AgentRefineResponse",
    # recommend
    "AgentRecommendRequest",
    "AgentRecommendResponse",
    # validate
    "AgentValidateRequest",
    "AgentValidateResponse",
    # analyze
    "AgentAnalyzeRequest",
    "AgentAnalyzeResponse",
    # modify
    "AgentModifyRequest",
    "AgentModifyResponse",
    # connection check / health
    "AgentConnectionResponse",
    "AgentHealthResponse",
]
