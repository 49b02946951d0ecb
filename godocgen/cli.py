"""CLI entrypoints for godocgen commands."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from .config import ConfigError, load_config
from .extractor import PackageExtractor
from .golang.errors import ExtractionError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="godocgen",
        description="Generate GitBook-style markdown documentation for Go packages.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the documentation tree for every configured package.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the configuration file (defaults to docs-config.json and friends).",
    )
    generate_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )

    extract_parser = subparsers.add_parser(
        "extract",
        help="Print the documentation model of one package as JSON.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    extract_parser.add_argument("package", help="Package name, relative to the root directory.")
    extract_parser.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Directory holding the package sources (defaults to current directory).",
    )
    extract_parser.add_argument(
        "--import-root",
        default="",
        help="Import path prefix used to build the package import path.",
    )
    extract_parser.add_argument(
        "--all-decls",
        action="store_true",
        help="Include unexported declarations.",
    )
    extract_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on the first file with syntax errors instead of skipping it.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for godocgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=getattr(args, "log_file", None),
    )

    if args.command == "generate":
        try:
            config = load_config(args.config)
        except ConfigError as exc:
            parser.exit(1, f"Failed to load configuration: {exc}\n")
        if config.output.verbose and not args.verbose:
            configure_logging(verbose=True, log_file=args.log_file)
        report = Orchestrator(config).run()
        print(
            f"Documentation generated for {len(report.generated)} package(s) "
            f"in {config.docs.docs_dir}"
        )
        for failure in report.failures:
            print(f"  failed: {failure.package}: {failure.error}")
    elif args.command == "extract":
        extractor = PackageExtractor(
            args.root,
            args.import_root,
            include_unexported=bool(args.all_decls),
            strict=bool(args.strict),
        )
        try:
            package = extractor.extract(args.package)
        except ExtractionError as exc:
            parser.exit(1, f"godocgen extract failed: {exc}\n")
        print(json.dumps(package.to_dict(), indent=2))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


__all__ = ["main"]
