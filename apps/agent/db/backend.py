"""SQLAlchemy-backed rule storage."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from contracts.rule import Rule
from core.errors import RuleNotFoundError
from core.logging import get_agent_logger

from .models import RuleRecord
from .session import create_rules_engine, create_session_factory, session_scope
from services.rule_store import RuleBackend

logger = get_agent_logger(__name__)


def _to_rule(record: RuleRecord) -> Rule:
    return Rule(
        id=record.id,
        original=record.original,
        parsed=dict(record.parsed or {}),
        priority=record.priority,
        weight=record.weight,
        status=record.status,
        suggestions=list(record.suggestions or []),
        createdAt=record.created_at,
        updatedAt=record.updated_at,
    )


def _apply(record: RuleRecord, rule: Rule) -> None:
    record.original = rule.original
    record.parsed = dict(rule.parsed)
    record.priority = rule.priority
    record.weight = rule.weight
    record.status = rule.status
    record.suggestions = list(rule.suggestions)
    record.created_at = rule.createdAt
    record.updated_at = rule.updatedAt


class SqlRuleBackend(RuleBackend):
    def __init__(self, factory: sessionmaker) -> None:
        self._factory = factory

    @classmethod
    def from_url(cls, database_url: str) -> "SqlRuleBackend":
        return cls(create_session_factory(create_rules_engine(database_url)))

    def list(self) -> List[Rule]:
        with session_scope(self._factory) as session:
            stmt = select(RuleRecord).order_by(RuleRecord.position)
            return [_to_rule(row) for row in session.execute(stmt).scalars()]

    def get(self, rule_id: str) -> Optional[Rule]:
        with session_scope(self._factory) as session:
            record = session.get(RuleRecord, rule_id)
            return _to_rule(record) if record else None

    def insert(self, rule: Rule) -> Rule:
        with session_scope(self._factory) as session:
            last = session.execute(select(func.max(RuleRecord.position))).scalar()
            record = RuleRecord(id=rule.id, position=(last or 0) + 1)
            _apply(record, rule)
            session.add(record)
            logger.debug("Inserted rule record id=%s position=%s", rule.id, record.position)
        return rule

    def replace(self, rule: Rule) -> Rule:
        with session_scope(self._factory) as session:
            record = session.get(RuleRecord, rule.id)
            if record is None:
                raise RuleNotFoundError(rule.id)
            _apply(record, rule)
        return rule

    def delete(self, rule_id: str) -> None:
        with session_scope(self._factory) as session:
            record = session.get(RuleRecord, rule_id)
            if record is None:
                raise RuleNotFoundError(rule_id)
            session.delete(record)
