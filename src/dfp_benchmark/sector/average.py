"""Average account values across a peer group."""

from __future__ import annotations

import logging
from typing import Sequence

from dfp_benchmark.accounts.period import resolve_period
from dfp_benchmark.models import SectorAverage
from dfp_benchmark.store.base import AccountStore

log = logging.getLogger(__name__)


class PeerAverager:
    """Mean value per account code over the peers' records.

    The mean is taken over every matching record in the window, so a peer
    reporting a code twice weighs twice.
    """

    def __init__(self, store: AccountStore):
        self._store = store

    def average(
        self,
        peers: Sequence[str],
        year: int,
        penultimate: bool = False,
    ) -> SectorAverage:
        """Return code -> mean value for the selected exercise.

        An empty peer group yields an empty result.

        Raises:
            InvalidPeriod: if `year` cannot be turned into a window.
            StoreQueryFailed: if the store query cannot execute.
        """
        if not peers:
            log.info("Empty peer group for %d, no sector average", year)
            return {}

        order, window = resolve_period(year, penultimate)
        averages = self._store.average_by_code(peers, order, window)
        log.info(
            "Sector average for %d (%s): %d accounts over %d peers",
            year,
            order.name,
            len(averages),
            len(peers),
        )
        return averages
