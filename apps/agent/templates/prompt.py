"""Versioned prompt templates for the rule pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Prompt:
    """A rendered prompt ready for the model gateway."""

    system: str
    user: str
    temperature: float = 0.0
    max_tokens: Optional[int] = None
    template: str = ""
    version: str = ""


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    version: str
    system: str
    user: str
    temperature: float = 0.0
    max_tokens: Optional[int] = None
    description: str = field(default="", compare=False)

    @property
    def key(self) -> str:
        return f"{self.name}@{self.version}"

    def render(self, **values: Any) -> Prompt:
        """Fill the user message; the system message is used verbatim."""
        return Prompt(
            system=self.system,
            user=self.user.format(**values),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            template=self.name,
            version=self.version,
        )
