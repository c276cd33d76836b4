"""Command-line entry point for the yq provider."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .client import YqServiceClient
from .config import ProviderConfig, load_config
from .errors import ProviderError
from .result import EvaluationResult, format_summary_table

logger = logging.getLogger(__name__)

EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report container images tagged 'latest' in a tree of YAML documents",
    )
    parser.add_argument(
        "--location",
        "-l",
        default=None,
        help="Root directory to scan (defaults to the config location or the current directory).",
    )
    parser.add_argument(
        "--condition",
        "-c",
        default=None,
        help="Path to the condition payload, or '-' to read it from stdin.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Provider config file (location and providerSpecificConfig).",
    )
    parser.add_argument(
        "--yq",
        dest="yq_path",
        default=None,
        help="Path to the yq binary.",
    )
    parser.add_argument(
        "--yq-arg",
        dest="yq_args",
        action="append",
        default=None,
        help="Extra argument placed before the query (repeatable).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-file yq timeout in seconds.",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write the JSON report (e.g., artifacts/incidents.json).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable).",
    )
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def resolve_config(args: argparse.Namespace) -> ProviderConfig:
    config = load_config(Path(args.config)) if args.config else ProviderConfig()
    if args.location:
        config.location = Path(args.location)
    if args.yq_path:
        config.yq_path = args.yq_path
    if args.yq_args is not None:
        config.yq_args = tuple(args.yq_args)
    if args.timeout is not None:
        config.timeout_seconds = args.timeout
    return config


def read_condition(source: str | None) -> bytes:
    if source is None:
        return b""
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def render_report(result: EvaluationResult) -> str:
    return json.dumps(result.to_dict(), indent=2, sort_keys=True)


def emit_report(result: EvaluationResult, output_path: str | None) -> None:
    """Send the JSON report to stdout (and ``output_path``), the summary to stderr."""

    report = render_report(result)
    sys.stdout.write(report + "\n")
    sys.stderr.write(format_summary_table(result) + "\n")
    if not output_path:
        return
    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(report, encoding="utf-8")
    logger.info("Report written to %s", target)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = resolve_config(args)
        condition = read_condition(args.condition)
        with YqServiceClient(config) as client:
            result = client.evaluate(condition)
    except ProviderError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    emit_report(result, args.output_path)
    return result.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
