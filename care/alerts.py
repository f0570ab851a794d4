"""
Safety-alert classifier.

Looks at the most recent check-in inside the lookback window and sorts its
tags against :data:`care.taxonomy.SEVERE_TAGS` and
:data:`care.taxonomy.MODERATE_TAGS`. Severe always wins; moderate needs at
least :data:`care.taxonomy.MODERATE_THRESHOLD` matches. Tags outside both
lists, including anything unrecognised, are ignored.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from care.queries import _now
from care.schema import AlertSeverity, SafetyAlertResult, SymptomEntry, SymptomTag
from care.taxonomy import (
    MODERATE_MESSAGE,
    MODERATE_TAGS,
    MODERATE_THRESHOLD,
    SEVERE_MESSAGE,
    SEVERE_TAGS,
)

DEFAULT_WINDOW = timedelta(days=1)


def latest_in_window(
    entries: Iterable[SymptomEntry],
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_WINDOW,
) -> Optional[SymptomEntry]:
    """Most recently logged entry with ``now - window <= logged_at <= now``."""
    now = _now(now)
    cutoff = now - window
    candidates = [e for e in entries if cutoff <= e.logged_at <= now]
    if not candidates:
        return None
    return max(candidates, key=lambda e: (e.logged_at, e.id))


def classify_tags(tags: Iterable[str | SymptomTag]) -> SafetyAlertResult:
    severe: List[str] = []
    moderate: List[str] = []
    for raw in tags:
        tag = SymptomTag.parse(raw)
        if tag is SymptomTag.unknown:
            continue
        if tag in SEVERE_TAGS and tag.value not in severe:
            severe.append(tag.value)
        elif tag in MODERATE_TAGS and tag.value not in moderate:
            moderate.append(tag.value)

    if severe:
        return SafetyAlertResult(
            triggered=True,
            severity=AlertSeverity.severe,
            message=SEVERE_MESSAGE,
            matched_tags=severe,
        )
    if len(moderate) >= MODERATE_THRESHOLD:
        return SafetyAlertResult(
            triggered=True,
            severity=AlertSeverity.moderate,
            message=MODERATE_MESSAGE,
            matched_tags=moderate,
        )
    return SafetyAlertResult()


def classify_safety_alert(
    entries: Iterable[SymptomEntry],
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_WINDOW,
) -> SafetyAlertResult:
    """Alert for the latest check-in in the window; no entry means no alert."""
    latest = latest_in_window(entries, now=now, window=window)
    if latest is None:
        return SafetyAlertResult()
    return classify_tags(latest.symptom_tags)
