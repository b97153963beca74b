"""Rule store with an injectable backend."""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from contracts.rule import Rule
from core.errors import RuleNotFoundError
from core.logging import get_agent_logger

logger = get_agent_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class RuleBackend(ABC):
    """Storage for Rule records, kept in insertion order."""

    @abstractmethod
    def list(self) -> List[Rule]:
        ...

    @abstractmethod
    def get(self, rule_id: str) -> Optional[Rule]:
        ...

    @abstractmethod
    def insert(self, rule: Rule) -> Rule:
        ...

    @abstractmethod
    def replace(self, rule: Rule) -> Rule:
        """Overwrite an existing record; raises RuleNotFoundError if missing."""

    @abstractmethod
    def delete(self, rule_id: str) -> None:
        """Remove a record; raises RuleNotFoundError if missing."""


class InMemoryRuleBackend(RuleBackend):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._rules: Dict[str, Rule] = {}

    def list(self) -> List[Rule]:
        with self._lock:
            return [rule.model_copy(deep=True) for rule in self._rules.values()]

    def get(self, rule_id: str) -> Optional[Rule]:
        with self._lock:
            rule = self._rules.get(rule_id)
            return rule.model_copy(deep=True) if rule else None

    def insert(self, rule: Rule) -> Rule:
        with self._lock:
            self._rules[rule.id] = rule.model_copy(deep=True)
        return rule

    def replace(self, rule: Rule) -> Rule:
        with self._lock:
            if rule.id not in self._rules:
                raise RuleNotFoundError(rule.id)
            self._rules[rule.id] = rule.model_copy(deep=True)
        return rule

    def delete(self, rule_id: str) -> None:
        with self._lock:
            if rule_id not in self._rules:
                raise RuleNotFoundError(rule_id)
            del self._rules[rule_id]


class RuleStore:
    """Create/read/update/delete for rules; owns ids and timestamps."""

    def __init__(
        self,
        backend: Optional[RuleBackend] = None,
        *,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.backend = backend if backend is not None else InMemoryRuleBackend()
        self._id_factory = id_factory
        self._clock = clock

    def list(self) -> List[Rule]:
        return self.backend.list()

    def get(self, rule_id: str) -> Optional[Rule]:
        return self.backend.get(rule_id)

    def require(self, rule_id: str) -> Rule:
        rule = self.backend.get(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    def create(self, original: str, **fields: Any) -> Rule:
        now = self._clock()
        rule = Rule(id=self._id_factory(), original=original, createdAt=now, updatedAt=now, **fields)
        self.backend.insert(rule)
        logger.info("Created rule id=%s", rule.id)
        return rule

    def update(self, rule_id: str, **changes: Any) -> Rule:
        current = self.require(rule_id)
        data = current.model_dump()
        data.update({key: value for key, value in changes.items() if value is not None})
        data["id"] = current.id
        data["createdAt"] = current.createdAt
        data["updatedAt"] = self._clock()
        updated = Rule.model_validate(data)
        self.backend.replace(updated)
        logger.info("Updated rule id=%s fields=%s", rule_id, sorted(changes))
        return updated

    def delete(self, rule_id: str) -> None:
        self.backend.delete(rule_id)
        logger.info("Deleted rule id=%s", rule_id)

    def texts(self) -> List[str]:
        return [rule.original for rule in self.backend.list()]
