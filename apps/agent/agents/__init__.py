"""Rule pipeline stages exposed by the agent service layer."""

from core.logging import get_agent_logger

from .analysis_graph import build_analysis_graph
from .intelligence import AnalysisResult, RuleIntelligence
from .llm import ChatModelGateway, ModelGateway, complete_or_none
from .modifier import RuleModifier
from .parser import RuleParser
from .recommender import RecommendationEngine
from .refiner import RuleRefiner
from .validator import CrossRuleValidator

logger = get_agent_logger(__name__)

__all__ = [
    "RuleIntelligence",
    "AnalysisResult",
    "build_analysis_graph",
    "ModelGateway",
    "ChatModelGateway",
    "complete_or_none",
    "RuleParser",
    "RuleRefiner",
    "RecommendationEngine",
    "CrossRuleValidator",
    "RuleModifier",
]

logger.debug("Agent package loaded exports=%s", __all__)
