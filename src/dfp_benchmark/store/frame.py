"""Account store over a Dask DataFrame snapshot.

The frame carries the same columns as the Mongo documents (`code`,
`short_label`, `description`, `company_name`, `period_tag`, `reported_at`,
`value`). Filters are evaluated lazily and materialized with `compute()`;
results are small (one company or one peer group) so they are handled in
pandas afterwards.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Sequence
from typing import cast, Any as TypingAny

import dask.dataframe as dd
import pandas as pd

from dfp_benchmark.db import load_collection_to_ddf
from dfp_benchmark.exceptions import StoreQueryFailed
from dfp_benchmark.models import AccountItem, AccountRecord, ExerciseOrder, TimeWindow
from dfp_benchmark.store.base import check_year_range

log = logging.getLogger(__name__)

ITEM_COLUMNS = ["code", "short_label", "description"]
RECORD_DTYPES = {
    "code": "int64",
    "short_label": "object",
    "description": "object",
    "company_name": "object",
    "period_tag": "object",
    "reported_at": "datetime64[ns, UTC]",
    "value": "float64",
}


@contextmanager
def _query(operation: str, **details: Any) -> Iterator[None]:
    try:
        yield
    except (KeyError, ValueError, TypeError) as e:
        raise StoreQueryFailed(
            f"failed to {operation}", operation=operation, details=details, cause=e
        ) from e


def _record(row: dict[str, Any]) -> AccountRecord:
    reported_at = row["reported_at"]
    if isinstance(reported_at, pd.Timestamp):
        row["reported_at"] = reported_at.to_pydatetime()
    return AccountRecord.model_validate(row)


class FrameAccountStore:
    """Account store answering queries from a Dask DataFrame.

    Args:
        ddf: Dask DataFrame of account records. `reported_at` is coerced to
            UTC timestamps; a frame without columns is read as an empty
            store.
    """

    def __init__(self, ddf: Any):
        dd_mod = cast(TypingAny, dd)
        if len(ddf.columns) == 0:
            # snapshot of an empty collection
            empty = pd.DataFrame({c: pd.Series(dtype=t) for c, t in RECORD_DTYPES.items()})
            ddf = dd_mod.from_pandas(empty, npartitions=1)
        if "reported_at" in ddf.columns:
            ddf = ddf.assign(reported_at=dd_mod.to_datetime(ddf["reported_at"], utc=True))
        self._ddf = ddf

    @classmethod
    def from_collection(cls, collection: Any) -> "FrameAccountStore":
        """Snapshot a Mongo collection into Dask partitions."""
        return cls(load_collection_to_ddf(collection, {"_id": False}))

    def _select(
        self,
        company_prefix: str,
        order: ExerciseOrder,
        window: TimeWindow | None = None,
    ) -> Any:
        ddf = self._ddf
        mask = ddf["company_name"].str.startswith(company_prefix, na=False) & ddf[
            "period_tag"
        ].str.match(order.pattern, na=False)
        if window is not None:
            mask = mask & self._in_window(window)
        return ddf[mask]

    def _in_window(self, window: TimeWindow) -> Any:
        reported_at = self._ddf["reported_at"]
        return (reported_at >= pd.Timestamp(window.start)) & (
            reported_at < pd.Timestamp(window.end)
        )

    def account_items(self, company_prefix: str, order: ExerciseOrder) -> list[AccountItem]:
        with _query("list account items", company=company_prefix, order=order.name):
            pdf = self._select(company_prefix, order)[ITEM_COLUMNS].drop_duplicates().compute()
            pdf = pdf.sort_values(["short_label", "description"], kind="stable")
            return [AccountItem(**row) for row in pdf.to_dict("records")]

    def account_records(
        self,
        company_prefix: str,
        order: ExerciseOrder,
        window: TimeWindow,
    ) -> list[AccountRecord]:
        with _query(
            "read account values",
            company=company_prefix,
            order=order.name,
            start=window.start.date(),
        ):
            pdf = self._select(company_prefix, order, window).compute()
            pdf = pdf.sort_values("reported_at", kind="stable")
            return [_record(row) for row in pdf.to_dict("records")]

    def average_by_code(
        self,
        companies: Sequence[str],
        order: ExerciseOrder,
        window: TimeWindow,
    ) -> dict[int, float]:
        with _query(
            "average peer accounts",
            companies=len(companies),
            order=order.name,
            start=window.start.date(),
        ):
            ddf = self._ddf
            mask = (
                ddf["company_name"].isin(list(companies))
                & ddf["period_tag"].str.match(order.pattern, na=False)
                & self._in_window(window)
            )
            means = ddf[mask].groupby("code")["value"].mean().compute()
        return {int(code): float(avg) for code, avg in means.items() if pd.notna(avg)}

    def companies(self) -> list[str]:
        with _query("list companies"):
            names = self._ddf["company_name"].dropna().unique().compute()
        return sorted(n for n in names if n)

    def has_company(self, company_prefix: str) -> bool:
        with _query("look up company", company=company_prefix):
            ddf = self._ddf
            hits = ddf[ddf["company_name"].str.startswith(company_prefix, na=False)]
            return int(hits.shape[0].compute()) > 0

    def year_range(self) -> tuple[int, int]:
        with _query("read reporting years"):
            first = self._ddf["reported_at"].min().compute()
            last = self._ddf["reported_at"].max().compute()
        if pd.isna(first) or pd.isna(last):
            return check_year_range(None, None)
        return check_year_range(first.year, last.year)
