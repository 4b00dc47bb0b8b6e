"""git-ratchet - fail builds when code-quality measures regress."""

from .config import RatchetSettings
from .core import compare, compare_measures, resolve_exclusions
from .errors import (
    EmptyInputError,
    FormatError,
    NoComputedMeasuresError,
    NoStoredMeasuresError,
    RatchetError,
    RatchetFailure,
    SubprocessError,
    UnsupportedInputTypeError,
)
from .history import (
    commit_measures,
    get_exclusions,
    latest_commit_measure,
    persist_measures,
    read_exclusions,
    read_latest_commit_measure,
    record_exclusion,
)
from .parsing import parse_input_type, parse_measures, parse_measures_checkstyle, parse_measures_csv
from .types import CommitMeasure, Comparison, EventKind, Exclusion, InputType, Measure, MeasureEvent
from .version import __version__


__all__ = [
    # Models
    "Measure",
    "CommitMeasure",
    "Exclusion",
    "InputType",
    "Comparison",
    "EventKind",
    "MeasureEvent",
    # Parsing
    "parse_input_type",
    "parse_measures",
    "parse_measures_csv",
    "parse_measures_checkstyle",
    # History
    "commit_measures",
    "latest_commit_measure",
    "read_latest_commit_measure",
    "read_exclusions",
    "get_exclusions",
    "persist_measures",
    "record_exclusion",
    # Comparison
    "compare",
    "resolve_exclusions",
    "compare_measures",
    # Configuration
    "RatchetSettings",
    # Errors
    "RatchetError",
    "FormatError",
    "UnsupportedInputTypeError",
    "EmptyInputError",
    "NoComputedMeasuresError",
    "NoStoredMeasuresError",
    "SubprocessError",
    "RatchetFailure",
]
