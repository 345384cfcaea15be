from __future__ import annotations

from typing import Any

import pytest

from dfp_benchmark.store import FrameAccountStore

from factories import PENULT, make_store, record


@pytest.fixture
def sector_rows() -> list[dict[str, Any]]:
    return [
        record("PETROLEO BRASILEIRO S.A. - PETROBRAS", 101, 10.0, "2020-12-31"),
        record("PETROLEO BRASILEIRO S.A. - PETROBRAS", 102, 4.0, "2020-12-31",
               short_label="1.01", description="Ativo Circulante"),
        record("PETRO RIO S.A.", 101, 20.0, "2020-12-31"),
        record("PETRO RIO S.A.", 102, 6.0, "2020-12-31",
               short_label="1.01", description="Ativo Circulante"),
        record("3R PETROLEUM ÓLEO E GÁS S.A.", 101, 30.0, "2020-12-31"),
        # previous exercise as republished in the 2021 filing
        record("PETRO RIO S.A.", 101, 18.0, "2021-12-31", period_tag=PENULT),
        record("3R PETROLEUM ÓLEO E GÁS S.A.", 101, 28.0, "2021-12-31", period_tag=PENULT),
        record("PETRO RIO S.A.", 101, 25.0, "2021-12-31"),
    ]


@pytest.fixture
def sector_store(sector_rows: list[dict[str, Any]]) -> FrameAccountStore:
    return make_store(sector_rows)
