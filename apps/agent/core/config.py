from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from contracts.version import CONTRACT_VERSION
from core.logging import get_agent_logger

logger = get_agent_logger(__name__)

_DEFAULT_LLM_MODEL = "gpt-4.1-mini"

def _env_suffix() -> str:
    return (
        os.getenv("BUILD_ENV")
        or os.getenv("ENV")
        or os.getenv("NX_TASK_TARGET_CONFIGURATION")
        or ("development" if os.getenv("NODE_ENV") == "development" else "local")
    )

def _load_env() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../../"))
    env_path = os.path.join(repo_root, f".env.build.{_env_suffix()}")
    if load_dotenv(env_path):
        logger.info("Loaded agent environment from %s", env_path)
    else:
        logger.debug("No agent env file found at %s", env_path)

_load_env()

def _list(key: str) -> list[str]:
    val = os.getenv(key, "")
    return [v.strip() for v in val.split(",") if v.strip()]

def _clean(key: str) -> Optional[str]:
    raw = os.getenv(key)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None

AGENT_ALLOWED_ORIGINS = _list("AGENT_ALLOWED_ORIGINS")


@dataclass(frozen=True)
class LLMSettings:
    """Model gateway configuration read from the environment."""

    api_key: Optional[str] = None
    model: str = _DEFAULT_LLM_MODEL
    base_url: Optional[str] = None
    timeout: float = 60.0
    max_retries: int = 1

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "LLMSettings":
        base_url = _clean("LLM_BASE_URL")
        return cls(
            api_key=_clean("LLM_API_KEY"),
            model=_clean("LLM_MODEL") or _DEFAULT_LLM_MODEL,
            base_url=base_url.rstrip("/") if base_url else None,
            timeout=float(os.getenv("LLM_TIMEOUT", "60")),
            max_retries=int(os.getenv("LLM_MAX_RETRIES", "1")),
        )


def database_url() -> Optional[str]:
    """SQLAlchemy URL for the persistent rule store; None keeps rules in memory."""
    return _clean("RULES_DATABASE_URL")


def wire_common(app: FastAPI) -> None:
    app.title = "RuleCraft Agent"
    app.version = CONTRACT_VERSION
    app.docs_url = "/docs"
    app.redoc_url = "/redoc"
    app.openapi_url = "/openapi.json"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=AGENT_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(
        "Configured FastAPI instance origins=%s",
        AGENT_ALLOWED_ORIGINS if AGENT_ALLOWED_ORIGINS else "none",
    )
