"""Shared fixtures for the rule agent test suite."""

import os
import threading
from typing import Dict, List, Optional

os.environ["AGENT_FILE_LOG"] = "false"
os.environ.pop("LLM_API_KEY", None)
os.environ.pop("RULES_DATABASE_URL", None)

import pytest

from core.errors import ModelGatewayError, ModelUnavailableError
from templates.prompt import Prompt


class StubGateway:
    """Model gateway that replays scripted replies per template and counts calls."""

    def __init__(self, replies: Optional[Dict[str, str]] = None, error: Optional[Exception] = None):
        self.replies = dict(replies or {})
        self.error = error
        self.prompts: List[Prompt] = []
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def calls_for(self, template: str) -> List[Prompt]:
        return [prompt for prompt in self.prompts if prompt.template == template]

    def complete(self, prompt: Prompt) -> str:
        with self._lock:
            self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        reply = self.replies.get(prompt.template)
        if reply is None:
            raise ModelGatewayError(f"no scripted reply for {prompt.template}")
        return reply


@pytest.fixture
def failing_gateway():
    return StubGateway(error=ModelGatewayError("upstream timeout"))


@pytest.fixture
def offline_gateway():
    return StubGateway(error=ModelUnavailableError("LLM_API_KEY is not configured"))
