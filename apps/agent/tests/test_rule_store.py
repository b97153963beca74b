"""Rule store CRUD against both backends."""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from core.errors import RuleNotFoundError
from db.backend import SqlRuleBackend
from services.rule_store import RuleStore


def _clock():
    ticks = count()
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return lambda: start + timedelta(seconds=next(ticks))


class TestRuleStore:
    @pytest.fixture(params=["memory", "sqlite"])
    def store(self, request):
        ids = (f"rule-{n}" for n in count(1))
        backend = None
        if request.param == "sqlite":
            backend = SqlRuleBackend.from_url("sqlite:///:memory:")
        return RuleStore(backend, id_factory=lambda: next(ids), clock=_clock())

    def test_create_and_get(self, store):
        created = store.create(
            "If order value is over $100, apply 10% discount",
            parsed={"action": "apply_discount"},
            suggestions=["Cap it"],
            priority=3,
            weight=2.5,
        )
        fetched = store.get(created.id)
        assert fetched.id == "rule-1"
        assert fetched.original == created.original
        assert fetched.parsed == {"action": "apply_discount"}
        assert fetched.suggestions == ["Cap it"]
        assert fetched.priority == 3
        assert fetched.weight == 2.5
        assert fetched.status == "valid"

    def test_defaults(self, store):
        rule = store.create("Notify staff when stock is low")
        assert rule.priority == 1
        assert rule.weight == 1.0
        assert rule.suggestions == []

    def test_list_keeps_insertion_order(self, store):
        for text in ("rule one", "rule two", "rule three"):
            store.create(text)
        assert store.texts() == ["rule one", "rule two", "rule three"]
        assert [rule.id for rule in store.list()] == ["rule-1", "rule-2", "rule-3"]

    def test_update_keeps_identity_and_bumps_timestamp(self, store):
        created = store.create("rule one")
        updated = store.update(created.id, priority=4, weight=None, status="warning")
        assert updated.id == created.id
        assert updated.createdAt == created.createdAt
        assert updated.updatedAt > created.updatedAt
        assert updated.priority == 4
        assert updated.weight == 1.0
        stored = store.get(created.id)
        assert stored.priority == 4
        assert stored.status == "warning"

    def test_update_rejects_out_of_range_priority(self, store):
        created = store.create("rule one")
        with pytest.raises(ValueError):
            store.update(created.id, priority=9)

    def test_missing_rule(self, store):
        assert store.get("nope") is None
        with pytest.raises(RuleNotFoundError):
            store.require("nope")
        with pytest.raises(RuleNotFoundError):
            store.update("nope", priority=2)
        with pytest.raises(RuleNotFoundError):
            store.delete("nope")

    def test_delete(self, store):
        first = store.create("rule one")
        store.create("rule two")
        store.delete(first.id)
        assert store.texts() == ["rule two"]
