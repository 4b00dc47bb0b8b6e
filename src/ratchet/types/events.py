"""Events produced while comparing measures and resolving exclusions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ratchet.types.measure import Measure


class EventKind(Enum):
    """What happened to a measure during a check."""

    MISSING = "missing"
    NEW = "new"
    REGRESSION = "regression"
    UNUSED_EXCLUSION = "unused_exclusion"
    EXCUSED = "excused"
    UNEXCUSED = "unexcused"

    @property
    def is_failure(self) -> bool:
        return self in {EventKind.MISSING, EventKind.REGRESSION, EventKind.UNEXCUSED}


@dataclass(frozen=True)
class MeasureEvent:
    """A single observation about one measure name."""

    kind: EventKind
    name: str
    delta: int | None = None

    def describe(self) -> str:
        match self.kind:
            case EventKind.MISSING:
                return f"Missing computed value for stored measure: {self.name}"
            case EventKind.NEW:
                return f"New measure found: {self.name}"
            case EventKind.REGRESSION:
                return f"Measure rising: {self.name}, delta {self.delta}"
            case EventKind.UNUSED_EXCLUSION:
                return f"Exclusion found for not failing measure: {self.name}"
            case EventKind.EXCUSED:
                return f"Failing measure excused: {self.name}"
            case EventKind.UNEXCUSED:
                return f"No exclusion for failing measure: {self.name}"
        return self.name


@dataclass
class Comparison:
    """Outcome of a ratchet comparison.

    ``measures`` is the computed set with baselines clamped to history and is
    always populated, so it can be persisted even when the check fails.
    """

    measures: list[Measure]
    failing: list[str] = field(default_factory=list)
    events: list[MeasureEvent] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failing)
