from __future__ import annotations

import pytest

from dfp_benchmark.accounts.text import fold_match, remove_diacritics


def test_remove_diacritics_strips_marks() -> None:
    assert remove_diacritics("žůžo") == "zuzo"
    assert remove_diacritics("Petróbrás") == "Petrobras"
    assert remove_diacritics("AÇÚCAR E ÁLCOOL") == "ACUCAR E ALCOOL"


@pytest.mark.parametrize("s", ["žůžo", "São Paulo", "plain", "", "é"])
def test_remove_diacritics_is_idempotent(s: str) -> None:
    once = remove_diacritics(s)
    assert remove_diacritics(once) == once


def test_fold_match_is_case_insensitive_subsequence() -> None:
    assert fold_match("petrobras", "PETROLEO BRASILEIRO S.A. - PETROBRAS")
    assert fold_match("PRio", "petro rio s.a.")
    assert not fold_match("Vale", "PETRO RIO S.A.")
    assert fold_match("", "anything")


def test_fold_match_after_normalization_ignores_accents() -> None:
    stored = remove_diacritics("Petróbrás")
    assert not fold_match("Petrobras", "Petróbrás")
    assert fold_match(remove_diacritics("Petrobras"), stored)
