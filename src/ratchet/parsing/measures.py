"""Parse raw quality reports into sorted measure sets."""

from __future__ import annotations

import csv
import io
import logging
import re
from collections.abc import Iterable
from typing import TextIO
from xml.etree.ElementTree import ParseError, XMLPullParser

from ratchet.errors import FormatError, UnsupportedInputTypeError
from ratchet.types import InputType, Measure, sort_measures


logger = logging.getLogger(__name__)

ReportSource = str | TextIO | Iterable[str]

CHECKSTYLE_ERROR_TAG = "error"
CHECKSTYLE_MEASURE_NAME = "errors"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_input_type(name: str) -> InputType:
    match name:
        case "csv":
            return InputType.CSV
        case "checkstyle":
            return InputType.CHECKSTYLE
        case _:
            return InputType.UNKNOWN


def parse_measures(source: ReportSource, input_type: InputType) -> list[Measure]:
    """Parse a report of the given type into measures ordered by name."""
    match input_type:
        case InputType.CSV:
            return parse_measures_csv(source)
        case InputType.CHECKSTYLE:
            return parse_measures_checkstyle(source)
        case _:
            raise UnsupportedInputTypeError(f"Unknown input type: {input_type.value}", input_type)


def parse_measures_csv(source: ReportSource) -> list[Measure]:
    """Parse ``name,value[,baseline]`` rows.

    A missing baseline defaults to the value. Duplicate names are kept as
    separate entries. Whitespace around fields is trimmed, names included, so
    a name written as " a" sorts and matches as "a". Blank lines are skipped;
    a row with a blank value or baseline is a format error.
    """
    measures: list[Measure] = []
    reader = csv.reader(_as_lines(source))
    try:
        for row in reader:
            if not row or (len(row) == 1 and not row[0].strip()):
                continue
            if len(row) < 2:
                raise FormatError(f"Badly formatted measures on line {reader.line_num}: {row!r}", InputType.CSV)
            value = _parse_int(row[1], reader.line_num)
            baseline = _parse_int(row[2], reader.line_num) if len(row) > 2 else value
            measures.append(Measure(name=row[0].strip(), value=value, baseline=baseline))
    except csv.Error as exc:
        raise FormatError(f"Malformed CSV report: {exc}", InputType.CSV) from exc

    return sort_measures(measures)


def parse_measures_checkstyle(source: ReportSource) -> list[Measure]:
    """Count ``<error>`` elements anywhere in a checkstyle XML report."""
    parser = XMLPullParser(events=("start",))
    errors = 0
    try:
        for chunk in _as_lines(source):
            parser.feed(chunk)
            errors += _count_errors(parser)
        parser.close()
        errors += _count_errors(parser)
    except ParseError as exc:
        raise FormatError(f"Malformed checkstyle report: {exc}", InputType.CHECKSTYLE) from exc

    logger.debug("Counted %d checkstyle errors", errors)
    return [Measure(name=CHECKSTYLE_MEASURE_NAME, value=errors, baseline=errors)]


def format_measures_csv(measures: Iterable[Measure]) -> str:
    """Render measures as the CSV form understood by ``parse_measures_csv``."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for measure in measures:
        writer.writerow([measure.name, measure.value, measure.baseline])
    return buffer.getvalue()


def _count_errors(parser: XMLPullParser) -> int:
    count = 0
    for _event, element in parser.read_events():
        if element.tag.rpartition("}")[2] == CHECKSTYLE_ERROR_TAG:
            count += 1
    return count


def _parse_int(field: str, line_num: int) -> int:
    text = field.strip()
    if not _INTEGER.fullmatch(text):
        raise FormatError(f"Invalid integer {field!r} on line {line_num}", InputType.CSV)
    return int(text)


def _as_lines(source: ReportSource) -> Iterable[str]:
    if isinstance(source, str):
        return io.StringIO(source, newline="")
    return source
