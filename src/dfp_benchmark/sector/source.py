"""Sector-membership source backed by a YAML file.

Expected layout (one entry per sector)::

    - sector: Petróleo, Gás e Biocombustíveis
      subsectors:
        - subsector: Petróleo, Gás e Biocombustíveis
          segments:
            - segment: Exploração, Refino e Distribuição
              companies: [Petrobras, PetroRio, 3R Petroleum]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NoReturn, Protocol

import yaml

from dfp_benchmark.accounts.text import fold_match, remove_diacritics
from dfp_benchmark.exceptions import PeerResolutionFailed

log = logging.getLogger(__name__)


class SectorSource(Protocol):
    def peers(self, company: str) -> list[str]:
        """Display names of the companies in the same segment as `company`."""
        ...


class YamlSectorSource:
    """Read sector segments from `path` on every lookup.

    Args:
        path: YAML file with the sector > subsector > segment hierarchy.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _segments(self, company: str) -> list[dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                sectors = yaml.safe_load(f) or []
        except (OSError, yaml.YAMLError) as e:
            raise PeerResolutionFailed(
                "cannot read sectors file",
                company=company,
                details={"path": str(self.path)},
                cause=e,
            ) from e

        if not isinstance(sectors, list):
            raise PeerResolutionFailed(
                "sectors file must hold a list of sectors",
                company=company,
                details={"path": str(self.path)},
            )

        segments: list[dict[str, Any]] = []
        for sector in sectors:
            for subsector in self._children(sector, "subsectors", company):
                for segment in self._children(subsector, "segments", company):
                    if not isinstance(segment, dict):
                        self._malformed("segment must be a mapping", company)
                    companies = segment.get("companies") or []
                    if not isinstance(companies, list):
                        self._malformed("segment companies must be a list", company)
                    segments.append(segment)
        return segments

    def _children(self, node: Any, key: str, company: str) -> list[Any]:
        if node is None:
            return []
        if not isinstance(node, dict):
            self._malformed(f"entry holding {key} must be a mapping", company)
        children = node.get(key) or []
        if not isinstance(children, list):
            self._malformed(f"{key} must be a list", company)
        return children

    def _malformed(self, message: str, company: str) -> NoReturn:
        raise PeerResolutionFailed(
            message, company=company, details={"path": str(self.path)}
        )

    def peers(self, company: str) -> list[str]:
        """Return the companies of the first segment listing `company`.

        A segment entry lists `company` when the entry, without diacritics,
        fold-matches the company name. Returns an empty list when no segment
        does.

        Raises:
            PeerResolutionFailed: if the file is missing or malformed.
        """
        target = remove_diacritics(company)
        for segment in self._segments(company):
            names = [str(n) for n in segment.get("companies") or []]
            if any(fold_match(remove_diacritics(n), target) for n in names):
                log.debug("%r found in segment %r", company, segment.get("segment"))
                return names

        log.info("%r not listed in any segment of %s", company, self.path)
        return []
