"""Error taxonomy for ratchet checks."""

from __future__ import annotations

from ratchet.types import EventKind, InputType, Measure, MeasureEvent


class RatchetError(Exception):
    """Base class for every error raised by ratchet."""


class FormatError(RatchetError):
    """A report, commit record or note could not be decoded."""

    def __init__(self, message: str, input_type: InputType | None = None) -> None:
        self.input_type = input_type
        super().__init__(message)


class UnsupportedInputTypeError(FormatError):
    """No parser exists for the requested input type."""


class EmptyInputError(RatchetError):
    """One side of a comparison has no measures."""


class NoComputedMeasuresError(EmptyInputError):
    def __init__(self) -> None:
        super().__init__("No measures passed to git-ratchet to compare against.")


class NoStoredMeasuresError(EmptyInputError):
    def __init__(self) -> None:
        super().__init__("No stored measures to compare against.")


class SubprocessError(RatchetError):
    """Git could not be started, failed, or timed out."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class RatchetFailure(RatchetError):
    """One or more measures regressed without a matching exclusion.

    Carries the adjusted measures and every event so callers can persist the
    new baseline and explain the failure.
    """

    def __init__(
        self,
        measures: list[Measure],
        events: list[MeasureEvent],
        message: str = "One or more metrics currently failing.",
    ) -> None:
        self.measures = measures
        self.events = events
        super().__init__(message)

    @property
    def unexcused(self) -> list[str]:
        return [event.name for event in self.events if event.kind is EventKind.UNEXCUSED]
