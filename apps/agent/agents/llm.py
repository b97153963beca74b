"""Model gateway used by every rule pipeline stage."""

from __future__ import annotations

from typing import Optional, Protocol

from core.config import LLMSettings
from core.errors import ModelGatewayError, ModelUnavailableError
from core.logging import get_agent_logger, preview
from templates.prompt import Prompt

logger = get_agent_logger(__name__)


class ModelGateway(Protocol):
    """Anything that can turn a prompt into raw model text, or raise."""

    def complete(self, prompt: Prompt) -> str:
        ...


class ChatModelGateway:
    """OpenAI-compatible chat model behind LangChain.

    Raises ``ModelUnavailableError`` before any network traffic when no API key
    is configured, and ``ModelGatewayError`` for every failed or empty call.
    """

    def __init__(self, settings: Optional[LLMSettings] = None) -> None:
        self.settings = settings or LLMSettings.from_env()
        logger.debug(
            "ChatModelGateway initialized model=%s base_url=%s timeout=%s configured=%s",
            self.settings.model,
            self.settings.base_url,
            self.settings.timeout,
            self.settings.configured,
        )

    @property
    def model_name(self) -> str:
        return self.settings.model

    def _build_llm(self, prompt: Prompt):
        try:  # Lazy import
            from langchain_openai import ChatOpenAI
        except Exception as exc:
            raise ModelUnavailableError("LangChain OpenAI integration is not installed") from exc

        llm_kwargs = {
            "model": self.settings.model,
            "temperature": prompt.temperature,
            "api_key": self.settings.api_key,
            "timeout": self.settings.timeout,
            "max_retries": self.settings.max_retries,
        }
        if self.settings.base_url:
            llm_kwargs["base_url"] = self.settings.base_url
        if prompt.max_tokens:
            llm_kwargs["max_tokens"] = prompt.max_tokens
        return ChatOpenAI(**llm_kwargs)

    def complete(self, prompt: Prompt) -> str:
        if not self.settings.configured:
            raise ModelUnavailableError("LLM_API_KEY is not configured")

        try:
            from langchain_core.messages import HumanMessage, SystemMessage
        except Exception as exc:
            raise ModelUnavailableError("LangChain core is not installed") from exc

        messages = [SystemMessage(content=prompt.system), HumanMessage(content=prompt.user)]
        logger.info(
            "Invoking model template=%s version=%s model=%s",
            prompt.template,
            prompt.version,
            self.settings.model,
        )
        try:
            ai = self._build_llm(prompt).invoke(messages)
        except ModelGatewayError:
            raise
        except Exception as exc:
            raise ModelGatewayError(f"{type(exc).__name__}: {exc}") from exc

        content = getattr(ai, "content", "")
        if not isinstance(content, str) or not content.strip():
            raise ModelGatewayError("model returned no text content")
        logger.debug("Model reply template=%s preview='%s'", prompt.template, preview(content))
        return content


def complete_or_none(gateway: ModelGateway, prompt: Prompt, *, stage: str, subject: str) -> Optional[str]:
    """Call the gateway and absorb every failure into ``None``.

    Offline mode (no credentials) is expected and logged at info; anything else
    is a degraded run and logged as a warning.
    """
    try:
        return gateway.complete(prompt)
    except ModelUnavailableError as exc:
        logger.info("%s running offline (%s) rule='%s'", stage, exc, preview(subject))
    except ModelGatewayError as exc:
        logger.warning("%s model call failed (%s) rule='%s'", stage, exc, preview(subject))
    except Exception:
        logger.exception("%s model gateway raised unexpectedly rule='%s'", stage, preview(subject))
    return None
