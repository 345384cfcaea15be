"""MongoDB-backed account store.

Each query maps one-to-one onto a `find`/`aggregate` call over the account
records collection. Driver errors are wrapped into `StoreQueryFailed`
together with the query parameters.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Sequence

from pydantic import ValidationError
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from dfp_benchmark.exceptions import StoreQueryFailed
from dfp_benchmark.models import AccountItem, AccountRecord, ExerciseOrder, TimeWindow
from dfp_benchmark.store.base import check_year_range

log = logging.getLogger(__name__)


@contextmanager
def _query(operation: str, **details: Any) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        raise StoreQueryFailed(
            f"failed to {operation}", operation=operation, details=details, cause=e
        ) from e
    except ValidationError as e:
        raise StoreQueryFailed(
            f"malformed record while trying to {operation}",
            operation=operation,
            details=details,
            cause=e,
        ) from e


def _prefix(company_prefix: str) -> dict[str, str]:
    return {"$regex": "^" + re.escape(company_prefix)}


def _window(window: TimeWindow) -> dict[str, datetime]:
    return {"$gte": window.start, "$lt": window.end}


class MongoAccountStore:
    """Account store over a PyMongo collection.

    Args:
        collection: Collection of account record documents.
    """

    def __init__(self, collection: Collection[dict[str, Any]]):
        self._collection = collection

    def account_items(self, company_prefix: str, order: ExerciseOrder) -> list[AccountItem]:
        pipeline = [
            {
                "$match": {
                    "company_name": _prefix(company_prefix),
                    "period_tag": {"$regex": order.pattern},
                }
            },
            {
                "$group": {
                    "_id": {
                        "code": "$code",
                        "short_label": "$short_label",
                        "description": "$description",
                    }
                }
            },
            {"$sort": {"_id.short_label": ASCENDING, "_id.description": ASCENDING}},
        ]
        with _query("list account items", company=company_prefix, order=order.name):
            return [AccountItem(**doc["_id"]) for doc in self._collection.aggregate(pipeline)]

    def account_records(
        self,
        company_prefix: str,
        order: ExerciseOrder,
        window: TimeWindow,
    ) -> list[AccountRecord]:
        query = {
            "company_name": _prefix(company_prefix),
            "period_tag": {"$regex": order.pattern},
            "reported_at": _window(window),
        }
        with _query(
            "read account values",
            company=company_prefix,
            order=order.name,
            start=window.start.date(),
        ):
            cursor = self._collection.find(query, {"_id": 0}).sort(
                [("reported_at", ASCENDING), ("_id", ASCENDING)]
            )
            return [AccountRecord.model_validate(doc) for doc in cursor]

    def average_by_code(
        self,
        companies: Sequence[str],
        order: ExerciseOrder,
        window: TimeWindow,
    ) -> dict[int, float]:
        pipeline = [
            {
                "$match": {
                    "company_name": {"$in": list(companies)},
                    "period_tag": {"$regex": order.pattern},
                    "reported_at": _window(window),
                }
            },
            {"$group": {"_id": "$code", "average": {"$avg": "$value"}}},
        ]
        averages: dict[int, float] = {}
        with _query(
            "average peer accounts",
            companies=len(companies),
            order=order.name,
            start=window.start.date(),
        ):
            for doc in self._collection.aggregate(pipeline):
                if doc["_id"] is None or doc["average"] is None:
                    continue
                averages[int(doc["_id"])] = float(doc["average"])
        return averages

    def companies(self) -> list[str]:
        with _query("list companies"):
            names = self._collection.distinct("company_name")
        return sorted(n for n in names if n)

    def has_company(self, company_prefix: str) -> bool:
        with _query("look up company", company=company_prefix):
            doc = self._collection.find_one(
                {"company_name": _prefix(company_prefix)}, {"_id": 1}
            )
        return doc is not None

    def year_range(self) -> tuple[int, int]:
        pipeline = [
            {
                "$group": {
                    "_id": None,
                    "first": {"$min": "$reported_at"},
                    "last": {"$max": "$reported_at"},
                }
            }
        ]
        with _query("read reporting years"):
            docs = list(self._collection.aggregate(pipeline))
        if not docs or docs[0].get("first") is None:
            return check_year_range(None, None)
        return check_year_range(docs[0]["first"].year, docs[0]["last"].year)
