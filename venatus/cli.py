"""CLI entrypoint for venatus audits."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .auditor import Auditor
from .config import ConfigError, apply_overrides, load_config
from .logging import configure_logging
from .report import render_table, report_to_dict
from .tree_loader import LoadError


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="venatus",
        description="Score how much of a target source tree still resembles a source tree.",
    )
    parser.add_argument("--source", help="Path to the source (original) tree.")
    parser.add_argument("--target", help="Path to the target (migrated) tree.")
    parser.add_argument(
        "--skip",
        type=_split_csv,
        default=None,
        help="Comma-separated target basenames to leave out of the audit.",
    )
    parser.add_argument(
        "--ext",
        dest="extensions",
        action="append",
        default=None,
        help="File extension to compare; repeat for several (defaults to .c and .h).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes used for matching.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Minimum basename similarity before two files are compared.",
    )
    parser.add_argument(
        "--diff-timeout",
        type=float,
        default=None,
        help="Seconds allowed for each pairwise diff before it is cut short.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .venatus.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of a table.",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_false",
        help="Disable coloured table rows.",
    )
    parser.add_argument(
        "--no-progress",
        dest="progress",
        action="store_false",
        help="Hide the progress bar while matching.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only log warnings and errors (implied by --json).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for venatus."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet or args.json),
        log_file=args.log_file,
    )

    try:
        config = apply_overrides(
            load_config(Path(args.config)),
            source=args.source,
            target=args.target,
            skip=args.skip,
            extensions=args.extensions,
            workers=args.workers,
            filename_threshold=args.threshold,
            diff_timeout=args.diff_timeout,
        )
        source, target = config.require_paths()
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    auditor = Auditor(config, show_progress=args.progress and sys.stderr.isatty())
    try:
        report = auditor.run(source, target, skip=config.skip)
    except LoadError as exc:
        parser.exit(1, f"{exc}\n")

    if args.json:
        print(json.dumps(report_to_dict(report), indent=2))
    else:
        sys.stdout.write(render_table(report, color=args.color and sys.stdout.isatty()))


if __name__ == "__main__":
    main(sys.argv[1:])
