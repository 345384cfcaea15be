"""Store query interface shared by all backends."""

from __future__ import annotations

from typing import Protocol, Sequence

from dfp_benchmark.exceptions import InvalidPeriod
from dfp_benchmark.models import AccountItem, AccountRecord, ExerciseOrder, TimeWindow

YEAR_MIN = 1900
YEAR_MAX = 2100


class AccountStore(Protocol):
    """Read-only queries over the stored account records."""

    def account_items(self, company_prefix: str, order: ExerciseOrder) -> list[AccountItem]:
        """Distinct items of companies starting with `company_prefix`,
        ordered by (short_label, description)."""
        ...

    def account_records(
        self,
        company_prefix: str,
        order: ExerciseOrder,
        window: TimeWindow,
    ) -> list[AccountRecord]:
        """Records inside `window`, oldest `reported_at` first."""
        ...

    def average_by_code(
        self,
        companies: Sequence[str],
        order: ExerciseOrder,
        window: TimeWindow,
    ) -> dict[int, float]:
        """Mean value per account code across exactly `companies`."""
        ...

    def companies(self) -> list[str]:
        """Distinct company names, sorted."""
        ...

    def has_company(self, company_prefix: str) -> bool:
        """True if any stored company starts with `company_prefix`."""
        ...

    def year_range(self) -> tuple[int, int]:
        """First and last calendar year with reported data."""
        ...


def check_year_range(begin: int | None, end: int | None) -> tuple[int, int]:
    """Validate the (begin, end) years found in a store, swapping if reversed.

    Raises:
        InvalidPeriod: if a year is missing or outside YEAR_MIN..YEAR_MAX.
    """
    if begin is None or end is None:
        raise InvalidPeriod("store holds no reporting dates")
    for y in (begin, end):
        if not YEAR_MIN <= y <= YEAR_MAX:
            raise InvalidPeriod(
                "reporting year out of range",
                year=y,
                details={"min": YEAR_MIN, "max": YEAR_MAX},
            )
    if begin > end:
        begin, end = end, begin
    return begin, end
