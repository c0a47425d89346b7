"""Command line entry point: analyze a report and write JSON, Markdown and CSV outputs."""

from __future__ import annotations

import argparse
from collections.abc import Iterable
import datetime as dt
import json
import logging
from pathlib import Path

from .analysis import analyze_report
from .config import load_config
from .errors import E2ETrendsError
from .export import write_matrix_csv
from .io import load_report, parse_iso8601
from .report import build_json_payload, render_markdown

LOGGER = logging.getLogger("e2e_trends.cli")

EXIT_OK = 0
EXIT_INPUT_ERROR = 2

__all__ = ["EXIT_OK", "EXIT_INPUT_ERROR", "JsonLogFormatter", "parse_args", "main"]


class JsonLogFormatter(logging.Formatter):
    """Emit one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _configure_logging(as_json: bool, verbose: bool) -> None:
    handler = logging.StreamHandler()
    if as_json:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def _parse_now(value: str) -> dt.datetime:
    parsed = parse_iso8601(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"not an ISO 8601 timestamp: {value!r}")
    return parsed


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze E2E suite run history")
    parser.add_argument("--report", type=Path, required=True, help="Path to the report JSON")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML configuration")
    parser.add_argument("--out-json", type=Path, default=None, help="Output path for the JSON payload")
    parser.add_argument(
        "--out-markdown",
        type=Path,
        default=None,
        help="Output path for the Markdown snapshot",
    )
    parser.add_argument(
        "--csv-dir",
        type=Path,
        default=None,
        help="Directory receiving one matrix CSV per suite",
    )
    parser.add_argument(
        "--now",
        type=_parse_now,
        default=None,
        help="Reference instant for window statistics (default: current UTC time)",
    )
    parser.add_argument("--log-format", choices=("text", "json"), default="text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = None if argv is None else list(argv)
    return parser.parse_args(args)


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.log_format == "json", args.verbose)
    now: dt.datetime = args.now or dt.datetime.now(dt.UTC)

    try:
        config = load_config(args.config)
        report = load_report(args.report)
    except E2ETrendsError as exc:
        LOGGER.error("%s", exc)
        return EXIT_INPUT_ERROR

    analysis = analyze_report(report, now=now, config=config)

    if args.out_json is not None:
        args.out_json.parent.mkdir(parents=True, exist_ok=True)
        json_text = json.dumps(build_json_payload(analysis), indent=2, ensure_ascii=False) + "\n"
        args.out_json.write_text(json_text, encoding="utf-8")
        LOGGER.info("wrote %s", args.out_json)

    if args.out_markdown is not None:
        args.out_markdown.parent.mkdir(parents=True, exist_ok=True)
        args.out_markdown.write_text("\n".join(render_markdown(analysis)) + "\n", encoding="utf-8")
        LOGGER.info("wrote %s", args.out_markdown)

    if args.csv_dir is not None:
        for suite in analysis.suites:
            write_matrix_csv(args.csv_dir, suite.title, suite.runs, suite.matrix)

    return EXIT_OK
