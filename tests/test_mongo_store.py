from __future__ import annotations

import re
from datetime import datetime
from typing import Any

import pytest
from pymongo.errors import OperationFailure

from dfp_benchmark.accounts.period import resolve_period
from dfp_benchmark.exceptions import InvalidPeriod, StoreQueryFailed
from dfp_benchmark.models import ExerciseOrder
from dfp_benchmark.store import MongoAccountStore


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]):
        self.docs = docs
        self.sort_spec: Any = None

    def sort(self, spec: Any) -> "FakeCursor":
        self.sort_spec = spec
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """Records the queries issued and replays canned documents."""

    def __init__(self, docs: list[dict[str, Any]] | None = None, error: Exception | None = None):
        self.docs = docs or []
        self.error = error
        self.calls: list[tuple[str, Any]] = []
        self.cursor: FakeCursor | None = None

    def _call(self, name: str, arg: Any) -> None:
        self.calls.append((name, arg))
        if self.error is not None:
            raise self.error

    def aggregate(self, pipeline: list[dict[str, Any]]):
        self._call("aggregate", pipeline)
        return iter(self.docs)

    def find(self, query: dict[str, Any], projection: dict[str, Any]) -> FakeCursor:
        self._call("find", query)
        self.cursor = FakeCursor(self.docs)
        return self.cursor

    def find_one(self, query: dict[str, Any], projection: dict[str, Any]):
        self._call("find_one", query)
        return self.docs[0] if self.docs else None

    def distinct(self, key: str) -> list[Any]:
        self._call("distinct", key)
        return [d.get(key) for d in self.docs]


def test_account_items_groups_and_sorts() -> None:
    coll = FakeCollection([
        {"_id": {"code": 1, "short_label": "1", "description": "Ativo Total"}},
        {"_id": {"code": 2, "short_label": "1.01", "description": "Ativo Circulante"}},
    ])
    items = MongoAccountStore(coll).account_items("Acme (SA)", ExerciseOrder.LAST)

    assert [i.code for i in items] == [1, 2]
    _, pipeline = coll.calls[0]
    match = pipeline[0]["$match"]
    assert match["company_name"] == {"$regex": "^" + re.escape("Acme (SA)")}
    assert match["period_tag"] == {"$regex": "^.LTIMO$"}
    assert pipeline[-1]["$sort"] == {"_id.short_label": 1, "_id.description": 1}


def test_account_records_query_window_and_order() -> None:
    coll = FakeCollection([{
        "code": 101,
        "company_name": "Acme",
        "period_tag": "PENÚLTIMO",
        "reported_at": datetime(2021, 12, 31),
        "value": 7.0,
    }])
    order, window = resolve_period(2020, penultimate=True)
    recs = MongoAccountStore(coll).account_records("Acme", order, window)

    assert [(r.code, r.value) for r in recs] == [(101, 7.0)]
    _, query = coll.calls[0]
    assert query["reported_at"] == {"$gte": window.start, "$lt": window.end}
    assert query["period_tag"] == {"$regex": "^PEN.LTIMO$"}
    assert coll.cursor is not None and coll.cursor.sort_spec[0] == ("reported_at", 1)


def test_average_by_code_groups_by_code() -> None:
    coll = FakeCollection([{"_id": 101, "average": 15.0}, {"_id": 102, "average": None}])
    order, window = resolve_period(2020)
    avg = MongoAccountStore(coll).average_by_code(["P1", "P2"], order, window)

    assert avg == {101: 15.0}
    _, pipeline = coll.calls[0]
    assert pipeline[0]["$match"]["company_name"] == {"$in": ["P1", "P2"]}
    assert pipeline[1]["$group"] == {"_id": "$code", "average": {"$avg": "$value"}}


def test_companies_sorted_without_blanks() -> None:
    coll = FakeCollection([{"company_name": "B"}, {"company_name": None}, {"company_name": "A"}])
    assert MongoAccountStore(coll).companies() == ["A", "B"]


def test_year_range_from_min_max() -> None:
    coll = FakeCollection([{"_id": None, "first": datetime(2021, 12, 31), "last": datetime(2010, 12, 31)}])
    assert MongoAccountStore(coll).year_range() == (2010, 2021)


def test_year_range_empty_store() -> None:
    with pytest.raises(InvalidPeriod):
        MongoAccountStore(FakeCollection([])).year_range()


def test_driver_errors_are_wrapped_with_context() -> None:
    coll = FakeCollection(error=OperationFailure("boom"))
    order, window = resolve_period(2020)
    with pytest.raises(StoreQueryFailed) as exc:
        MongoAccountStore(coll).account_records("Acme", order, window)

    err = exc.value
    assert err.details["operation"] == "read account values"
    assert err.details["company"] == "Acme"
    assert isinstance(err.cause, OperationFailure)
    assert "boom" in str(err)


def test_malformed_documents_raise_store_query_failed() -> None:
    coll = FakeCollection([{"code": "not-a-code", "company_name": "Acme"}])
    order, window = resolve_period(2020)
    with pytest.raises(StoreQueryFailed):
        MongoAccountStore(coll).account_records("Acme", order, window)
