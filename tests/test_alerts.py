import sys
from datetime import datetime, timedelta, timezone
from itertools import combinations
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from care.alerts import classify_safety_alert, classify_tags
from care.schema import AlertSeverity, SymptomEntry
from care.taxonomy import MODERATE_MESSAGE, MODERATE_TAGS, SEVERE_MESSAGE, SEVERE_TAGS

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _entry(tags, hours_ago=1, entry_id="e1"):
    return SymptomEntry(
        id=entry_id,
        owner_id="u1",
        mood="okay",
        symptom_tags=list(tags),
        logged_at=NOW - timedelta(hours=hours_ago),
    )


MODERATE = sorted(t.value for t in MODERATE_TAGS)


@pytest.mark.parametrize("severe", sorted(t.value for t in SEVERE_TAGS))
@pytest.mark.parametrize("extra", [(), tuple(MODERATE[:1]), tuple(MODERATE[:2]), tuple(MODERATE)])
def test_severe_wins_over_any_moderate(severe, extra):
    result = classify_safety_alert([_entry((*extra, severe))], now=NOW)
    assert result.triggered
    assert result.severity is AlertSeverity.severe
    assert result.message == SEVERE_MESSAGE
    assert result.matched_tags == [severe]


@pytest.mark.parametrize("tag", MODERATE)
def test_single_moderate_tag_does_not_trigger(tag):
    result = classify_safety_alert([_entry([tag, "fatigue"])], now=NOW)
    assert not result.triggered
    assert result.severity is AlertSeverity.none
    assert result.matched_tags == []
    assert result.message == ""


@pytest.mark.parametrize("pair", list(combinations(MODERATE, 2)))
def test_two_moderate_tags_trigger(pair):
    result = classify_safety_alert([_entry(pair)], now=NOW)
    assert result.triggered
    assert result.severity is AlertSeverity.moderate
    assert result.message == MODERATE_MESSAGE
    assert result.matched_tags == list(pair)


def test_no_entries_in_window():
    assert classify_safety_alert([], now=NOW).triggered is False
    stale = _entry(["heavy_bleeding"], hours_ago=30)
    result = classify_safety_alert([stale], now=NOW)
    assert result.triggered is False
    assert result.matched_tags == []


def test_only_latest_entry_counts():
    older = _entry(["heavy_bleeding"], hours_ago=5, entry_id="a")
    newer = _entry(["fatigue"], hours_ago=1, entry_id="b")
    assert classify_safety_alert([older, newer], now=NOW).triggered is False
    assert classify_safety_alert([newer, older], now=NOW).triggered is False


def test_future_entries_are_outside_window():
    future = _entry(["vision_changes"], hours_ago=-2)
    assert classify_safety_alert([future], now=NOW).triggered is False


def test_unknown_tags_are_ignored():
    assert classify_tags(["sneezing", "swelling"]).triggered is False
    result = classify_tags(["sneezing", "swelling", "Chest Pain"])
    assert result.severity is AlertSeverity.moderate
    assert result.matched_tags == ["swelling", "chest_pain"]


def test_duplicate_moderate_tag_counts_once():
    assert classify_tags(["swelling", "swelling"]).triggered is False


def test_classifier_is_repeatable():
    entries = [_entry(["high_fever", "chest_pain"])]
    assert classify_safety_alert(entries, now=NOW) == classify_safety_alert(entries, now=NOW)


def test_tag_lists_are_disjoint():
    assert not SEVERE_TAGS & MODERATE_TAGS
