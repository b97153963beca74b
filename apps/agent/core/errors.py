"""Error types shared by the rule agent."""

from __future__ import annotations


class ModelGatewayError(Exception):
    """The language model call failed (network, auth, quota, timeout, empty reply)."""


class ModelUnavailableError(ModelGatewayError):
    """No usable model is configured, so no call was attempted."""


class RuleNotFoundError(KeyError):
    def __init__(self, rule_id: str) -> None:
        super().__init__(rule_id)
        self.rule_id = rule_id

    def __str__(self) -> str:
        return f"rule {self.rule_id} not found"


class AnalysisSupersededError(RuntimeError):
    """A newer analysis was submitted for the same rule; this result was discarded."""

    def __init__(self, rule_key: str, generation: int, latest: int) -> None:
        super().__init__(
            f"analysis generation {generation} for {rule_key} superseded by {latest}"
        )
        self.rule_key = rule_key
        self.generation = generation
        self.latest = latest
