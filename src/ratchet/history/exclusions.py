"""Read recorded exclusions from commit notes."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from pydantic import ValidationError

from ratchet.config import RatchetSettings
from ratchet.errors import FormatError
from ratchet.history.git import open_git_log
from ratchet.types import Exclusion


logger = logging.getLogger(__name__)

EXCLUSION_FORMAT = "%N"


def parse_exclusion(text: str) -> list[str]:
    """Decode one exclusion note into the measure names it excuses."""
    logger.debug("Exclusion %s", text)
    try:
        return Exclusion.model_validate_json(text.strip("'")).measure
    except ValidationError as exc:
        raise FormatError(f"Invalid exclusion note {text!r}: {exc.errors()[0]['msg']}") from exc


def format_exclusion(names: Iterable[str], explanation: str | None = None) -> str:
    exclusion = Exclusion(measure=sorted(set(names)), explanation=explanation)
    return json.dumps(exclusion.model_dump(exclude_none=True))


def read_exclusions(lines: Iterable[str]) -> list[str]:
    """Collect every excused name from one-note-per-line output, sorted.

    Duplicates are kept. A note that fails to decode aborts the read.
    """
    exclusions: list[str] = []
    for line in lines:
        record = line.strip().strip("'")
        if not record:
            continue
        exclusions.extend(parse_exclusion(record))

    exclusions.sort()
    return exclusions


def exclusion_range(revision: str) -> str:
    # Excluding the first parent lets an exclusion recorded on a merge cover
    # everything it brings in.
    return f"{revision}^1..HEAD"


def get_exclusions(prefix: str, revision: str, settings: RatchetSettings | None = None) -> list[str]:
    """Return the sorted exclusions recorded between ``revision`` and HEAD."""
    settings = (settings or RatchetSettings()).model_copy(update={"prefix": prefix})
    with open_git_log(settings, settings.exclusions_ref, exclusion_range(revision), EXCLUSION_FORMAT) as log:
        exclusions = read_exclusions(log.lines())
    logger.info("Total excuses %s", exclusions)
    return exclusions
