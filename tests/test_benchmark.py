from __future__ import annotations

import math

import pytest

from dfp_benchmark.accounts.catalog import AccountCatalog
from dfp_benchmark.accounts.values import ValueExtractor
from dfp_benchmark.benchmark import Benchmark
from dfp_benchmark.exceptions import InvalidPeriod
from dfp_benchmark.sector.average import PeerAverager
from dfp_benchmark.sector.matcher import SectorMatcher
from dfp_benchmark.store import FrameAccountStore

from factories import StaticSource, make_store, record

PEERS = ["Petrobras", "PetroRio", "3R Petroleum"]


def test_catalog_deduplicates_repeated_rows() -> None:
    store = make_store([
        record("Acme Corp", 101, 1.0, "2020-12-31"),
        record("Acme Corp", 101, 1.0, "2020-12-31"),
    ])
    items = AccountCatalog(store).items("Acme")
    assert [(i.code, i.short_label, i.description) for i in items] == [(101, "1", "Ativo Total")]


def test_catalog_empty_for_unknown_company(sector_store: FrameAccountStore) -> None:
    assert AccountCatalog(sector_store).items("WEG") == []


def test_extractor_returns_literal_values_inside_window() -> None:
    store = make_store([
        record("Acme Corp", 101, 10.5, "2020-12-31"),
        record("Acme Corp", 102, -3.25, "2020-06-30"),
        record("Acme Corp", 103, 99.0, "2021-01-01"),
        record("Acme Corp", 104, 99.0, "2019-12-31"),
    ])
    assert ValueExtractor(store).values("Acme", 2020) == {101: 10.5, 102: -3.25}


def test_extractor_latest_report_wins_for_duplicated_code() -> None:
    store = make_store([
        record("Acme Corp", 101, 2.0, "2020-12-31"),
        record("Acme Corp", 101, 1.0, "2020-06-30"),
    ])
    assert ValueExtractor(store).values("Acme", 2020) == {101: 2.0}


def test_extractor_penultimate(sector_store: FrameAccountStore) -> None:
    assert ValueExtractor(sector_store).values("PETRO RIO", 2020, penultimate=True) == {101: 18.0}


def test_averager_means_per_code() -> None:
    store = make_store([
        record("P1", 101, 10.0, "2020-12-31"),
        record("P2", 101, 20.0, "2020-12-31"),
    ])
    assert PeerAverager(store).average(["P1", "P2"], 2020) == {101: 15.0}


def test_averager_empty_peer_group_is_not_an_error(sector_store: FrameAccountStore) -> None:
    assert PeerAverager(sector_store).average([], 2020) == {}


def test_out_of_range_year_fails_both_reads(sector_store: FrameAccountStore) -> None:
    with pytest.raises(InvalidPeriod):
        ValueExtractor(sector_store).values("PETRO RIO", 10000)
    with pytest.raises(InvalidPeriod):
        PeerAverager(sector_store).average(["PETRO RIO S.A."], 10000)


def test_compare_against_sector(sector_store: FrameAccountStore) -> None:
    bench = Benchmark(sector_store, SectorMatcher(StaticSource(PEERS)))
    cmp_ = bench.compare("PETRO RIO", 2020)

    assert cmp_.values == {101: 20.0, 102: 6.0}
    assert cmp_.peers == [
        "PETROLEO BRASILEIRO S.A. - PETROBRAS",
        "PETRO RIO S.A.",
        "3R PETROLEUM ÓLEO E GÁS S.A.",
    ]
    assert cmp_.averages == {101: 20.0, 102: 5.0}
    assert cmp_.has_sector_comparison

    df = cmp_.to_frame()
    assert list(df["short_label"]) == ["1", "1.01"]
    assert df.loc[df["code"] == 102, "vs_sector_pct"].iloc[0] == pytest.approx(20.0)
    assert df.loc[df["code"] == 101, "vs_sector_pct"].iloc[0] == pytest.approx(0.0)


def test_compare_without_peers_is_unavailable(sector_store: FrameAccountStore) -> None:
    source = StaticSource(["PetroRio"])
    bench = Benchmark(sector_store, SectorMatcher(source))
    cmp_ = bench.compare("PETRO RIO", 2020)

    assert source.calls == ["PETRO RIO"]
    assert cmp_.peers == []
    assert cmp_.averages == {}
    assert not cmp_.has_sector_comparison
    assert cmp_.values == {101: 20.0, 102: 6.0}
    assert cmp_.to_frame()["sector_average"].isna().all()


def test_compare_with_unmatched_peers_is_unavailable(sector_store: FrameAccountStore) -> None:
    bench = Benchmark(sector_store, SectorMatcher(StaticSource(["Enauta", "Karoon"])))
    cmp_ = bench.compare("PETRO RIO", 2020)
    assert cmp_.peers == []
    assert not cmp_.has_sector_comparison


def test_compare_rejects_invalid_year_before_querying(sector_store: FrameAccountStore) -> None:
    source = StaticSource(PEERS)
    with pytest.raises(InvalidPeriod):
        Benchmark(sector_store, SectorMatcher(source)).compare("PETRO RIO", 10000)
    assert source.calls == []


def test_to_frame_leaves_missing_values_nan() -> None:
    store = make_store([
        record("Acme", 1, 5.0, "2020-12-31"),
        record("Acme", 2, 0.0, "2019-12-31", short_label="2", description="Passivo Total"),
        record("Peer", 1, 0.0, "2020-12-31"),
        record("Other", 1, 0.0, "2020-12-31"),
    ])
    bench = Benchmark(store, SectorMatcher(StaticSource(["Peer", "Other"])))
    df = bench.compare("Acme", 2020).to_frame()

    row1 = df[df["code"] == 1].iloc[0]
    row2 = df[df["code"] == 2].iloc[0]
    assert row1["sector_average"] == 0.0
    assert math.isnan(row1["vs_sector_pct"])
    assert math.isnan(row2["value"])
