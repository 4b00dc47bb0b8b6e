"""Ratchet comparison and exclusion resolution.

Both algorithms are merge-joins over name-sorted sequences: neither sorts its
inputs, and neither logs. What happened to each measure is reported through
``MeasureEvent`` lists so callers decide how to render it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace

from ratchet.config import RatchetSettings
from ratchet.errors import NoComputedMeasuresError, NoStoredMeasuresError, RatchetFailure
from ratchet.history.exclusions import get_exclusions
from ratchet.types import Comparison, EventKind, Measure, MeasureEvent


logger = logging.getLogger(__name__)

ExclusionReader = Callable[[str, str, RatchetSettings | None], list[str]]


def compare(stored: Sequence[Measure], computed: Sequence[Measure], slack: int = 0) -> Comparison:
    """Compare computed measures against the stored baseline.

    Both sequences must be sorted by name. A computed measure whose baseline
    exceeds its stored counterpart's is clamped down to it. The clamp only
    applies to a same-named pair, never to whichever stored measure a new
    measure happens to sit beside in the merge. A stored measure
    with no computed counterpart, or a computed value above
    ``stored.baseline + slack``, is a failure. Computed measures with no stored
    counterpart are new and never fail.
    """
    if not computed:
        raise NoComputedMeasuresError()
    if not stored:
        raise NoStoredMeasuresError()

    adjusted = list(computed)
    failing: list[str] = []
    events: list[MeasureEvent] = []

    i = j = 0
    while i < len(stored) and j < len(adjusted):
        old = stored[i]
        new = adjusted[j]

        if old.name < new.name:
            events.append(MeasureEvent(EventKind.MISSING, old.name))
            failing.append(old.name)
            i += 1
        elif new.name < old.name:
            events.append(MeasureEvent(EventKind.NEW, new.name))
            j += 1
        else:
            if new.baseline > old.baseline:
                adjusted[j] = replace(new, baseline=old.baseline)
            if new.value > old.baseline + slack:
                events.append(MeasureEvent(EventKind.REGRESSION, new.name, delta=new.value - old.baseline))
                failing.append(new.name)
            i += 1
            j += 1

    for old in stored[i:]:
        events.append(MeasureEvent(EventKind.MISSING, old.name))
        failing.append(old.name)

    for new in adjusted[j:]:
        events.append(MeasureEvent(EventKind.NEW, new.name))

    return Comparison(measures=adjusted, failing=failing, events=events)


def resolve_exclusions(exclusions: Sequence[str], failing: Sequence[str]) -> list[MeasureEvent]:
    """Match sorted failing names against sorted exclusions.

    Returns the resolution events when every failure is excused, otherwise
    raises ``RatchetFailure``. There is no partial pass.
    """
    events: list[MeasureEvent] = []
    missing_exclusion = False

    i = j = 0
    while i < len(exclusions) and j < len(failing):
        excuse = exclusions[i]
        fail = failing[j]
        if excuse < fail:
            events.append(MeasureEvent(EventKind.UNUSED_EXCLUSION, excuse))
            i += 1
        elif fail < excuse:
            events.append(MeasureEvent(EventKind.UNEXCUSED, fail))
            missing_exclusion = True
            j += 1
        else:
            events.append(MeasureEvent(EventKind.EXCUSED, fail))
            i += 1
            j += 1

    for fail in failing[j:]:
        events.append(MeasureEvent(EventKind.UNEXCUSED, fail))

    if missing_exclusion or j < len(failing):
        raise RatchetFailure(measures=[], events=events)
    return events


def compare_measures(
    prefix: str,
    revision: str,
    stored: Sequence[Measure],
    computed: Sequence[Measure],
    slack: int = 0,
    *,
    exclusion_reader: ExclusionReader | None = None,
    settings: RatchetSettings | None = None,
) -> Comparison:
    """Run the full check: compare, then consult exclusions for any failure.

    Returns the comparison when nothing failed or every failure is excused.
    Raises ``RatchetFailure`` carrying the adjusted measures otherwise.
    """
    comparison = compare(stored, computed, slack)
    if not comparison.has_failures:
        return comparison

    logger.info("Checking for excuses")
    read = exclusion_reader or get_exclusions
    exclusions = read(prefix, revision, settings)

    try:
        comparison.events.extend(resolve_exclusions(exclusions, comparison.failing))
    except RatchetFailure as failure:
        raise RatchetFailure(
            measures=comparison.measures,
            events=comparison.events + failure.events,
        ) from None
    return comparison
