"""Extract the account values of one company for one exercise."""

from __future__ import annotations

import logging

from dfp_benchmark.accounts.period import resolve_period
from dfp_benchmark.models import AccountValues
from dfp_benchmark.store.base import AccountStore

log = logging.getLogger(__name__)


class ValueExtractor:
    """Read code -> value mappings for a company.

    Records come back oldest first, so when a code is reported more than once
    inside the window the most recent `reported_at` wins.
    """

    def __init__(self, store: AccountStore):
        self._store = store

    def values(self, company: str, year: int, penultimate: bool = False) -> AccountValues:
        """Return the values reported by `company` for the selected exercise.

        Args:
            company: Company name prefix.
            year: Fiscal year.
            penultimate: Read the second-to-last exercise of `year`.

        Raises:
            InvalidPeriod: if `year` cannot be turned into a window.
            StoreQueryFailed: if the store query cannot execute.
        """
        order, window = resolve_period(year, penultimate)

        values: AccountValues = {}
        records = self._store.account_records(company, order, window)
        for rec in records:
            values[rec.code] = rec.value

        if len(records) > len(values):
            log.debug(
                "%r %d: %d duplicated rows collapsed",
                company,
                year,
                len(records) - len(values),
            )
        log.info("Values for %r %d (%s): %d accounts", company, year, order.name, len(values))
        return values
