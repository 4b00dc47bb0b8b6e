"""Measure models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from operator import attrgetter


class InputType(Enum):
    """Report formats understood by the measure parser."""

    CSV = "csv"
    CHECKSTYLE = "checkstyle"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Measure:
    """One named quality reading and the ceiling it is judged against."""

    name: str
    value: int
    baseline: int


@dataclass(frozen=True)
class CommitMeasure:
    """Measures recorded as of a single revision."""

    commit_hash: str
    committer: str
    timestamp: datetime
    measures: list[Measure] = field(default_factory=list)


by_name = attrgetter("name")


def sort_measures(measures: list[Measure]) -> list[Measure]:
    """Return measures ordered by name (stable, case-sensitive)."""
    return sorted(measures, key=by_name)
