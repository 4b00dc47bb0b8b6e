from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from ..config import RatchetSettings
from ..core import compare_measures
from ..errors import NoStoredMeasuresError, RatchetError, RatchetFailure
from ..history import dump_history, head_revision, persist_measures, read_latest_commit_measure, record_exclusion
from ..parsing import parse_input_type, parse_measures
from ..reports import ConsoleReporter, write_history_csv
from ..types import Comparison, EventKind, Measure


EXIT_PASSED = 0
EXIT_FAILING = 1
EXIT_ERROR = 2


class CLIApplication:
    """Top-level command router."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.parser = argparse.ArgumentParser(
            prog="git-ratchet",
            description="Fail a build when tracked quality measures regress past their recorded baseline.",
        )
        self.parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase log verbosity (-v info, -vv debug).",
        )
        subparsers = self.parser.add_subparsers(dest="command", required=True)

        check = subparsers.add_parser("check", help="Compare a report against the stored baseline.")
        check.add_argument(
            "report_path",
            nargs="?",
            default="-",
            help="Report to check (default: read from stdin).",
        )
        check.add_argument(
            "-i",
            "--input-type",
            dest="input_type",
            default="csv",
            help="Report format: csv or checkstyle (default: csv).",
        )
        check.add_argument("-s", "--slack", type=int, help="RATCHET_SLACK override.")
        check.add_argument(
            "-w",
            "--write",
            action="store_true",
            help="Record the adjusted measures on HEAD, whatever the outcome.",
        )
        self._add_prefix(check)

        excuse = subparsers.add_parser("excuse", help="Allow named measures to regress from HEAD onwards.")
        excuse.add_argument(
            "-n",
            "--name",
            dest="names",
            action="append",
            required=True,
            help="Measure to excuse (repeatable).",
        )
        excuse.add_argument("-e", "--explanation", help="Why the regression is accepted.")
        self._add_prefix(excuse)

        dump = subparsers.add_parser("dump", help="Print every recorded baseline as CSV.")
        self._add_prefix(dump)

    @staticmethod
    def _add_prefix(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-p", "--prefix", help="RATCHET_PREFIX override.")

    def run(self, argv: Sequence[str] | None = None) -> int:
        load_dotenv(Path.cwd() / ".env")
        args = self.parser.parse_args(argv)
        configure_logging(args.verbose)
        reporter = ConsoleReporter(self.console, verbosity=args.verbose)

        try:
            settings = build_settings(args)
            match args.command:
                case "check":
                    return CheckCommand(reporter, settings, args).run()
                case "excuse":
                    return ExcuseCommand(reporter, settings, args).run()
                case _:
                    return DumpCommand(reporter, settings).run()
        except RatchetError as exc:
            reporter.print_error(exc)
            return EXIT_ERROR


class CheckCommand:
    """Pipeline driver for `git-ratchet check`."""

    def __init__(self, reporter: ConsoleReporter, settings: RatchetSettings, args: argparse.Namespace) -> None:
        self.reporter = reporter
        self.settings = settings
        self.report_path = args.report_path
        self.input_type = parse_input_type(args.input_type)
        self.write = args.write

    def run(self) -> int:
        computed = self._read_report()
        latest = read_latest_commit_measure(self.settings)
        stored = latest.measures if latest else []
        revision = latest.commit_hash if latest else "HEAD"
        if latest is not None:
            self.reporter.print_baseline(latest)

        try:
            comparison = compare_measures(
                self.settings.prefix,
                revision,
                stored,
                computed,
                self.settings.slack,
                settings=self.settings,
            )
        except NoStoredMeasuresError:
            if not self.write:
                raise
            self._persist(computed)
            self.reporter.console.print("No stored measures; recorded the initial baseline.", style="bold green")
            return EXIT_PASSED
        except RatchetFailure as failure:
            self.reporter.print_events(failure.events)
            self.reporter.print_error(failure)
            if self.write:
                self._persist(failure.measures)
            return EXIT_FAILING

        self._report(comparison)
        if self.write:
            self._persist(comparison.measures)
        return EXIT_PASSED

    def _persist(self, measures: list[Measure]) -> None:
        revision = head_revision(self.settings)
        persist_measures(self.settings.prefix, measures, revision=revision, settings=self.settings)
        self.reporter.console.print(f"Recorded {len(measures)} measures on {revision[:8]}", style="dim")

    def _read_report(self) -> list[Measure]:
        if self.report_path == "-":
            return parse_measures(sys.stdin, self.input_type)
        try:
            with open(Path(self.report_path).expanduser(), newline="", encoding="utf-8") as source:
                return parse_measures(source, self.input_type)
        except OSError as exc:
            raise RatchetError(f"Cannot read report {self.report_path}: {exc.strerror}") from exc

    def _report(self, comparison: Comparison) -> None:
        self.reporter.print_events(comparison.events)
        if self.reporter.verbosity >= 1:
            self.reporter.print_measures(comparison.measures)
        excused = any(event.kind is EventKind.EXCUSED for event in comparison.events)
        self.reporter.print_passed(excused=excused)


class ExcuseCommand:
    """Driver for `git-ratchet excuse`."""

    def __init__(self, reporter: ConsoleReporter, settings: RatchetSettings, args: argparse.Namespace) -> None:
        self.reporter = reporter
        self.settings = settings
        self.names = args.names
        self.explanation = args.explanation

    def run(self) -> int:
        revision = head_revision(self.settings)
        record_exclusion(self.settings.prefix, self.names, self.explanation, revision=revision, settings=self.settings)
        self.reporter.console.print(
            f"Excused {', '.join(sorted(set(self.names)))} from {revision[:8]}", style="bold green"
        )
        return EXIT_PASSED


class DumpCommand:
    """Driver for `git-ratchet dump`."""

    def __init__(self, reporter: ConsoleReporter, settings: RatchetSettings) -> None:
        self.reporter = reporter
        self.settings = settings

    def run(self) -> int:
        write_history_csv(dump_history(self.settings), sys.stdout)
        return EXIT_PASSED


def build_settings(args: argparse.Namespace) -> RatchetSettings:
    overrides = {
        key: value
        for key, value in (("prefix", getattr(args, "prefix", None)), ("slack", getattr(args, "slack", None)))
        if value is not None
    }
    try:
        return RatchetSettings(**overrides)
    except ValidationError as exc:
        raise RatchetError(f"Invalid configuration: {exc.errors()[0]['msg']}") from exc


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbosity >= 2)],
        force=True,
    )


def main() -> None:
    sys.exit(CLIApplication().run())
