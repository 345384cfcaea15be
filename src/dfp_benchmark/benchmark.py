"""Compare a company's accounts with its sector peer-group average.

`Benchmark.compare` runs the whole flow for one company and fiscal year:
resolve the exercise window, list the company's accounts, read their values,
resolve the sector peers against the stored companies and average the peers'
accounts over the same window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pandas as pd

from dfp_benchmark.accounts.catalog import AccountCatalog
from dfp_benchmark.accounts.period import resolve_period
from dfp_benchmark.accounts.values import ValueExtractor
from dfp_benchmark.models import AccountItem, AccountValues, PeerGroup, SectorAverage
from dfp_benchmark.sector.average import PeerAverager
from dfp_benchmark.sector.matcher import SectorMatcher
from dfp_benchmark.store.base import AccountStore

log = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "code",
    "short_label",
    "description",
    "value",
    "sector_average",
    "vs_sector_pct",
]


@dataclass
class Comparison:
    """Company accounts next to the sector averages for one exercise."""

    company: str
    year: int
    penultimate: bool
    items: list[AccountItem] = field(default_factory=list)
    values: AccountValues = field(default_factory=dict)
    peers: PeerGroup = field(default_factory=list)
    averages: SectorAverage = field(default_factory=dict)

    @property
    def has_sector_comparison(self) -> bool:
        """False when no peer average is available for this exercise."""
        return bool(self.averages)

    def to_frame(self) -> pd.DataFrame:
        """Return one row per catalog item, in catalog order.

        `value`/`sector_average` are NaN where the company or the peers did
        not report the account; `vs_sector_pct` is NaN where the average is
        missing or zero.
        """
        rows = []
        for item in self.items:
            value = self.values.get(item.code)
            average = self.averages.get(item.code)
            pct = None
            if value is not None and average:
                pct = (value - average) / abs(average) * 100.0
            rows.append(
                {
                    "code": item.code,
                    "short_label": item.short_label,
                    "description": item.description,
                    "value": value,
                    "sector_average": average,
                    "vs_sector_pct": pct,
                }
            )
        pdf = pd.DataFrame(rows, columns=FRAME_COLUMNS)
        for col in ("value", "sector_average", "vs_sector_pct"):
            pdf[col] = pd.to_numeric(pdf[col], errors="coerce")
        return pdf


class Benchmark:
    """Wire the store and the sector matcher into one comparison run.

    Args:
        store: Account store used for the company and its peers.
        matcher: Resolves sector peers into stored company names.
    """

    def __init__(self, store: AccountStore, matcher: SectorMatcher):
        self.store = store
        self.matcher = matcher
        self.catalog = AccountCatalog(store)
        self.extractor = ValueExtractor(store)
        self.averager = PeerAverager(store)

    def peers(self, company: str) -> PeerGroup:
        """Resolve the sector peers of `company` among the stored companies."""
        return self.matcher.match(company, self.store.companies())

    def compare(self, company: str, year: int, penultimate: bool = False) -> Comparison:
        """Build the comparison of `company` against its sector for `year`.

        Raises:
            InvalidPeriod: if `year` cannot be turned into a window.
            StoreQueryFailed: if a store query cannot execute.
            PeerResolutionFailed: if the sector source fails.
        """
        # validate the period before touching the store
        resolve_period(year, penultimate)

        items = self.catalog.items(company)
        values = self.extractor.values(company, year, penultimate)
        peers = self.peers(company)
        averages = self.averager.average(peers, year, penultimate)

        if not averages:
            log.info("%r %d: sector comparison unavailable", company, year)

        return Comparison(
            company=company,
            year=year,
            penultimate=penultimate,
            items=items,
            values=values,
            peers=peers,
            averages=averages,
        )
