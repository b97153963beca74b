from __future__ import annotations
from typing import Literal
from pydantic import BaseModel

# ----- Enums / aliases --------------------------------------------------------

RuleStatus = Literal["valid", "warning", "error"]

# Where a pipeline result came from: the language model, an offline fallback,
# the local refinement pre-check that rejected the input, or a fixed answer for
# input that needs no model at all (an empty rule set).
ResultSource = Literal["model", "fallback", "precheck", "trivial"]

# Priority 1 (Low) .. 4 (Critical)
PRIORITY_LABELS = {1: "low", 2: "medium", 3: "high", 4: "critical"}
MIN_PRIORITY = 1
MAX_PRIORITY = 4
MIN_WEIGHT = 0.0
MAX_WEIGHT = 10.0

# ----- Generic responses ------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "ok"
