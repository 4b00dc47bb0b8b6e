"""Record measures and exclusions as commit notes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ratchet.config import RatchetSettings
from ratchet.history.exclusions import format_exclusion
from ratchet.history.git import write_note
from ratchet.parsing import format_measures_csv
from ratchet.types import Measure


logger = logging.getLogger(__name__)


def persist_measures(
    prefix: str,
    measures: Sequence[Measure],
    revision: str = "HEAD",
    settings: RatchetSettings | None = None,
) -> None:
    """Store ``measures`` as the baseline recorded at ``revision``."""
    settings = (settings or RatchetSettings()).model_copy(update={"prefix": prefix})
    write_note(settings, settings.measures_ref, revision, format_measures_csv(measures))
    logger.info("Wrote %d measures to %s", len(measures), settings.measures_ref)


def record_exclusion(
    prefix: str,
    names: Iterable[str],
    explanation: str | None = None,
    revision: str = "HEAD",
    settings: RatchetSettings | None = None,
) -> None:
    """Excuse regressions of ``names`` from ``revision`` onwards."""
    names = list(names)
    if not names:
        raise ValueError("At least one measure name is required")
    settings = (settings or RatchetSettings()).model_copy(update={"prefix": prefix})
    write_note(settings, settings.exclusions_ref, revision, format_exclusion(names, explanation))
    logger.info("Excused %s on %s", ", ".join(sorted(set(names))), settings.exclusions_ref)
