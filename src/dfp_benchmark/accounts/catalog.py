"""List the accounts published by a company."""

from __future__ import annotations

import logging

from dfp_benchmark.models import AccountItem, ExerciseOrder
from dfp_benchmark.store.base import AccountStore

log = logging.getLogger(__name__)


class AccountCatalog:
    """Account codes and descriptions available for a company.

    Only records of the last exercise are considered, so the catalog mirrors
    the most recent chart of accounts, e.g.
    `[1 Ativo Total, 1.01 Ativo Circulante, ...]`.
    """

    def __init__(self, store: AccountStore):
        self._store = store

    def items(self, company: str) -> list[AccountItem]:
        """Return deduplicated items ordered by (short_label, description).

        Raises:
            StoreQueryFailed: if the store query cannot execute.
        """
        items = self._store.account_items(company, ExerciseOrder.LAST)

        seen: set[AccountItem] = set()
        unique: list[AccountItem] = []
        for item in items:
            if item not in seen:
                seen.add(item)
                unique.append(item)

        log.info("Catalog for %r: %d accounts", company, len(unique))
        return unique
