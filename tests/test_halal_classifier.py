from __future__ import annotations

import pytest

from viraleats.services.halal_classifier import HalalClassifier
from tests.fakes import make_row

classifier = HalalClassifier()


# ── Exclusion policy ─────────────────────────────────────────────────────


def test_pork_term_wins_over_malay_keyword():
    assert classifier.is_excluded_text("Nasi lemak with crispy bacon")


def test_cjk_only_text_is_excluded():
    assert classifier.is_excluded_text("老字号肉骨茶")


def test_kana_text_is_excluded():
    assert classifier.is_excluded_text("ラーメン Ichiban")


def test_plain_text_is_included():
    assert not classifier.is_excluded_text("Village Park Restaurant, Damansara Utama")


@pytest.mark.parametrize("text", [
    "Non-Halal Noodle House",
    "Craft Beer Garden",
    "Ah Weng Dim Sum",
    "Sakura Izakaya",
    "Hokkien Mee Corner",
])
def test_deny_keywords(text):
    assert classifier.is_excluded_text(text)


def test_row_scan_includes_tags_and_snippet():
    row = make_row("r1", name="Kopi Corner", tripadvisor_tags=["Wine Bar"])
    assert not classifier.is_halal_compatible(row)

    row = make_row("r2", name="Kopi Corner", tripadvisor_top_review_snippet="Best char siu in town")
    assert not classifier.is_halal_compatible(row)


def test_row_without_deny_terms_is_compatible():
    row = make_row("r3", name="Nasi Kandar Pelita", address="Jalan Ampang, Kuala Lumpur")
    assert classifier.is_halal_compatible(row)


# ── Inclusion policy ─────────────────────────────────────────────────────


def test_inclusion_needs_an_allow_keyword():
    assert classifier.classify_place("Restoran Nasi Kandar Pelita", ["restaurant"], "Jalan Ampang")
    assert not classifier.classify_place("Village Park Diner", ["restaurant"], "Damansara Utama")


def test_inclusion_deny_beats_allow():
    assert not classifier.classify_place("Nasi Goreng Babi", ["restaurant"], "Petaling Jaya")


def test_inclusion_deny_checks_types():
    assert not classifier.classify_place("Satay Station", ["bar", "restaurant"], "Cyberjaya")


def test_explicit_halal_marker():
    assert classifier.classify_place("Sunny Halal Kitchen", [], "")


# ── Dispatch ─────────────────────────────────────────────────────────────


def test_matches_dispatches_on_policy():
    row = make_row("r4", name="Village Park Diner", address="Damansara Utama")
    assert classifier.matches(row, "exclusion") is True
    assert classifier.matches(row, "inclusion") is False


def test_unknown_policy_falls_back_to_exclusion():
    row = make_row("r5", name="Pork Noodle Stall")
    assert classifier.matches(row, "bogus") is False
