from __future__ import annotations
from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from .common import (
    MAX_PRIORITY,
    MAX_WEIGHT,
    MIN_PRIORITY,
    MIN_WEIGHT,
    ResultSource,
    RuleStatus,
)

# ==============================================================================
# Provenance
# ==============================================================================

class SourcedModel(BaseModel):
    """Base for pipeline results that remember whether they came from the model.

    The marker is a private attribute so ``model_dump()`` only carries the
    documented fields.
    """

    _source: ResultSource = PrivateAttr(default="model")

    @property
    def source(self) -> ResultSource:
        return self._source

    @property
    def degraded(self) -> bool:
        return self._source == "fallback"

    def mark(self, source: ResultSource) -> "SourcedModel":
        self._source = source
        return self

# ==============================================================================
# Parsed rule (structured form; open bag beyond the four core fields)
# ==============================================================================

class ParsedRule(SourcedModel):
    """Structured condition/action view of one rule.

    Model output is kept as-is, so any field may be missing and extra keys
    are preserved.
    """

    model_config = ConfigDict(extra="allow")

    condition: Optional[str] = None
    action: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    logic: Optional[Dict[str, Any]] = None

# ==============================================================================
# Refinement
# ==============================================================================

class RuleRefinement(SourcedModel):
    originalRule: str
    improvedRule: str
    improvements: List[str] = Field(default_factory=list)
    reasoning: str = ""
    isValid: bool = True
    validationMessage: Optional[str] = None  # only set when isValid is False

# ==============================================================================
# Recommendations / validation / modification
# ==============================================================================

class RecommendationResult(SourcedModel):
    recommendations: List[str] = Field(default_factory=list)

class ValidationResult(SourcedModel):
    valid: bool = True
    conflicts: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

class ModificationResult(SourcedModel):
    modifiedRule: str

# ==============================================================================
# Rule entity (store record)
# ==============================================================================

class Rule(BaseModel):
    id: str
    original: str                                   # plain-language source text
    parsed: Dict[str, Any] = Field(default_factory=dict)
    priority: int = Field(MIN_PRIORITY, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    weight: float = Field(1.0, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    status: RuleStatus = "valid"
    suggestions: List[str] = Field(default_factory=list)
    createdAt: datetime
    updatedAt: datetime

__all__ = [
    "SourcedModel",
    "ParsedRule",
    "RuleRefinement",
    "RecommendationResult",
    "ValidationResult",
    "ModificationResult",
    "Rule",
]
