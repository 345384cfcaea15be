"""Match sector peer names against the companies present in the store."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from dfp_benchmark.accounts.text import fold_match, remove_diacritics
from dfp_benchmark.exceptions import PeerResolutionFailed
from dfp_benchmark.models import PeerGroup
from dfp_benchmark.sector.scoring import LevenshteinScorer, Scorer
from dfp_benchmark.sector.source import SectorSource

log = logging.getLogger(__name__)


class SectorMatcher:
    """Resolve the sector peers of a company into canonical stored names.

    Each peer candidate is compared, without diacritics, against every
    stored company name. Names that fold-match the candidate are ranked by
    `scorer` and the best one is kept; candidates with no match are dropped.

    Args:
        source: Sector-membership source.
        scorer: Ranks matching names, lower is better. Defaults to edit
            distance.
    """

    def __init__(self, source: SectorSource, scorer: Optional[Scorer] = None):
        self._source = source
        self._scorer = scorer or LevenshteinScorer()

    def _candidates(self, company: str) -> list[str]:
        try:
            return list(self._source.peers(company))
        except PeerResolutionFailed:
            raise
        except (OSError, LookupError, ValueError, TypeError, AttributeError) as e:
            raise PeerResolutionFailed(
                "sector source failed", company=company, cause=e
            ) from e

    def best_match(self, candidate: str, universe: Sequence[str]) -> Optional[str]:
        """Return the stored name closest to `candidate`, or None.

        Ties keep the name that comes first in `universe`.
        """
        target = remove_diacritics(candidate)
        matches = [
            (name, folded)
            for name, folded in ((n, remove_diacritics(n)) for n in universe)
            if fold_match(target, folded)
        ]
        if not matches:
            return None
        best, _ = min(matches, key=lambda m: self._scorer.score(target, m[1]))
        return best

    def match(self, company: str, universe: Sequence[str]) -> PeerGroup:
        """Return the peer group of `company`, in candidate order.

        Fewer than two candidates means there is nothing to compare against
        and an empty group is returned.

        Raises:
            PeerResolutionFailed: if the sector source fails.
        """
        candidates = self._candidates(company)
        if len(candidates) <= 1:
            log.info("%r: %d sector candidates, no peer group", company, len(candidates))
            return []

        peers: PeerGroup = []
        for candidate in candidates:
            best = self.best_match(candidate, universe)
            if best is None:
                log.info("%r: no stored company matches %r, skipping", company, candidate)
                continue
            log.debug("%r: %r -> %r", company, candidate, best)
            peers.append(best)

        log.info("%r: %d of %d sector candidates matched", company, len(peers), len(candidates))
        return peers
