"""Console reporter for ratchet checks using Rich."""

from __future__ import annotations

import csv
import sys
from collections.abc import Iterable
from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ratchet.types import CommitMeasure, EventKind, Measure, MeasureEvent


_EVENT_CONFIG: dict[EventKind, tuple[str, str]] = {
    EventKind.MISSING: ("✗", "red"),
    EventKind.REGRESSION: ("✗", "red"),
    EventKind.UNEXCUSED: ("✗", "red"),
    EventKind.NEW: ("+", "yellow"),
    EventKind.UNUSED_EXCLUSION: ("-", "yellow"),
    EventKind.EXCUSED: ("✓", "blue"),
}

HISTORY_HEADER = ["hash", "committer", "timestamp", "name", "value", "baseline"]


class ConsoleReporter:
    """Render comparison events, verdicts and history."""

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        self.console = console or Console(file=sys.__stdout__)
        self.verbosity = verbosity

    def print_events(self, events: Iterable[MeasureEvent]) -> None:
        for event in events:
            symbol, color = _EVENT_CONFIG[event.kind]
            if not event.kind.is_failure and event.kind is not EventKind.EXCUSED and self.verbosity < 1:
                continue
            self.console.print(f"[{color}]{symbol}[/{color}] {escape(event.describe())}")

    def print_measures(self, measures: Iterable[Measure], title: str = "Measures") -> None:
        table = Table(title=title)
        table.add_column("name")
        table.add_column("value", justify="right")
        table.add_column("baseline", justify="right")
        for measure in measures:
            table.add_row(escape(measure.name), str(measure.value), str(measure.baseline))
        self.console.print(table)

    def print_baseline(self, commit: CommitMeasure) -> None:
        self.console.print(
            f"baseline: {commit.commit_hash[:8]} by {escape(commit.committer)} "
            f"at {commit.timestamp.isoformat()}",
            style="dim",
        )

    def print_passed(self, excused: bool = False) -> None:
        message = "All measures within their baselines"
        if excused:
            message += " (regressions excused)"
        self.console.print(f"[green]✓[/green] {message}", style="bold green")

    def print_error(self, error: BaseException) -> None:
        self.console.print(f"[red]✗[/red] {escape(str(error))}", style="bold red")


def write_history_csv(history: Iterable[CommitMeasure], file: TextIO) -> int:
    """Write one CSV row per recorded measure; return the number of commits written."""
    writer = csv.writer(file, lineterminator="\n")
    writer.writerow(HISTORY_HEADER)
    count = 0
    for commit in history:
        for measure in commit.measures:
            writer.writerow(
                [
                    commit.commit_hash,
                    commit.committer,
                    int(commit.timestamp.timestamp()),
                    measure.name,
                    measure.value,
                    measure.baseline,
                ]
            )
        count += 1
    return count
