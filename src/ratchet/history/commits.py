"""Read recorded measure baselines from commit notes."""

from __future__ import annotations

import csv
import logging
import re
from collections.abc import Iterable, Iterator
from datetime import UTC, datetime

from ratchet.config import RatchetSettings
from ratchet.errors import FormatError
from ratchet.history.git import git_log_argv, git_process
from ratchet.parsing import parse_measures_csv
from ratchet.types import CommitMeasure, InputType


logger = logging.getLogger(__name__)

# hash, committer, unix timestamp, quoted note; the trailing comma keeps the
# note column closed even when git appends a newline to it.
COMMIT_MEASURE_FORMAT = '%H,%an <%ae>,%at,"%N",'

_TIMESTAMP = re.compile(r"[0-9]+")


def commit_measures(lines: Iterable[str]) -> Iterator[CommitMeasure]:
    """Yield a CommitMeasure for every commit whose note holds measures.

    ``lines`` is raw ``git log`` output in ``COMMIT_MEASURE_FORMAT``, newest
    commit first. Commits with an empty note, or a note that parses to no
    measures, are skipped. Any undecodable record aborts the walk.
    """
    reader = csv.reader(lines)
    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            raise FormatError(f"Malformed commit record: {exc}", InputType.CSV) from exc

        if not record:
            continue
        if len(record) < 4:
            raise FormatError(f"Malformed commit record: {record!r}", InputType.CSV)

        note = record[3].strip('\\"')
        if not note.strip():
            continue

        timestamp = _parse_timestamp(record[2])
        measures = parse_measures_csv(note)
        if not measures:
            logger.debug("Skipping commit %s: note holds no measures", record[0])
            continue

        yield CommitMeasure(
            commit_hash=record[0].strip("'"),
            committer=record[1],
            timestamp=timestamp,
            measures=measures,
        )


def latest_commit_measure(lines: Iterable[str]) -> CommitMeasure | None:
    """Return the most recent recorded baseline, or None if history has none."""
    return next(commit_measures(lines), None)


def commit_measure_command(prefix: str, settings: RatchetSettings | None = None) -> list[str]:
    """The ``git log`` invocation listing measure notes reachable from HEAD."""
    settings = (settings or RatchetSettings()).model_copy(update={"prefix": prefix})
    return git_log_argv(settings, settings.measures_ref, "HEAD", COMMIT_MEASURE_FORMAT)


def read_latest_commit_measure(settings: RatchetSettings) -> CommitMeasure | None:
    with git_process(settings, commit_measure_command(settings.prefix, settings)) as log:
        latest = latest_commit_measure(log.lines())
    if latest is not None:
        logger.info("Using baseline recorded at %s by %s", latest.commit_hash, latest.committer)
    return latest


def dump_history(settings: RatchetSettings) -> Iterator[CommitMeasure]:
    """Yield every recorded baseline reachable from HEAD, newest first."""
    with git_process(settings, commit_measure_command(settings.prefix, settings)) as log:
        yield from commit_measures(log.lines())


def _parse_timestamp(field: str) -> datetime:
    text = field.strip('\\"')
    if not _TIMESTAMP.fullmatch(text):
        raise FormatError(f"Invalid commit timestamp: {field!r}")
    return datetime.fromtimestamp(int(text), tz=UTC)
