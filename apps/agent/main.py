from typing import Optional

from fastapi import FastAPI

from agents.intelligence import RuleIntelligence
from core.config import database_url, wire_common
from core.logging import get_agent_logger
from routes.ai import router as ai_router
from routes.health import router as health_router
from routes.rules import router as rules_router
from services.rule_service import RuleService
from services.rule_store import RuleStore
from templates import get_templates

logger = get_agent_logger(__name__)


def _default_store() -> RuleStore:
    url = database_url()
    if not url:
        logger.info("Rule store backend=memory")
        return RuleStore()
    from db.backend import SqlRuleBackend

    logger.info("Rule store backend=sqlalchemy")
    return RuleStore(SqlRuleBackend.from_url(url))


def create_app(
    intelligence: Optional[RuleIntelligence] = None,
    store: Optional[RuleStore] = None,
) -> FastAPI:
    app = FastAPI()
    wire_common(app)

    app.state.intelligence = intelligence or RuleIntelligence()
    app.state.rule_service = RuleService(store or _default_store(), app.state.intelligence)
    logger.info("Prompt templates active=%s", sorted(template.key for template in get_templates().values()))

    # Mount routers
    app.include_router(health_router)
    app.include_router(ai_router)
    app.include_router(rules_router)
    return app


app = create_app()
