from __future__ import annotations
from typing import Optional, List, Literal
from pydantic import BaseModel, Field
from .common import MAX_PRIORITY, MAX_WEIGHT, MIN_PRIORITY, MIN_WEIGHT
from .rule import Rule

# ==============================================================================
# /rules (create/update payloads for the rule collection)
# ==============================================================================

class RuleCreatePayload(BaseModel):
    original: str
    priority: int = Field(MIN_PRIORITY, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    weight: float = Field(1.0, ge=MIN_WEIGHT, le=MAX_WEIGHT)


class RuleUpdatePayload(BaseModel):
    original: Optional[str] = None  # text edits re-run the analysis pipeline
    priority: Optional[int] = Field(None, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    weight: Optional[float] = Field(None, ge=MIN_WEIGHT, le=MAX_WEIGHT)

# ==============================================================================
# /rules responses
# ==============================================================================

class RuleResponse(BaseModel):
    rule: Rule


class RuleListResponse(BaseModel):
    rules: List[Rule] = Field(default_factory=list)
    total: int = 0


class RuleDeleteResponse(BaseModel):
    message: str = "Rule deleted"

# ==============================================================================
# /rules/stats  (collection analytics)
# ==============================================================================

class RuleStatusBreakdown(BaseModel):
    valid: int = 0
    warning: int = 0
    error: int = 0


class RulePriorityBreakdown(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0
    critical: int = 0


class RuleStats(BaseModel):
    total: int = 0
    byStatus: RuleStatusBreakdown = Field(default_factory=RuleStatusBreakdown)
    byPriority: RulePriorityBreakdown = Field(default_factory=RulePriorityBreakdown)
    successRate: int = 100  # percent of rules with status "valid"

    @property
    def with_issues(self) -> int:
        return self.byStatus.warning + self.byStatus.error


class RuleStatsResponse(BaseModel):
    stats: RuleStats

# ==============================================================================
# /rules/export
# ==============================================================================

ExportFormat = Literal["json", "csv"]
