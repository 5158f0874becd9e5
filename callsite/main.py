"""
callsite - Main Entry Point

Usage:
    callsite SYMBOL [PATH ...]          Find call-sites of SYMBOL
    callsite --list-symbols [PATH ...]  List symbols defined at top level

Exit codes: 0 matches found, 1 no matches, 2 usage or configuration error.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .analysis import CallerSearcher, parse_symbol
from .core import Config, logger, setup_console_only, setup_logging
from .report import build_definitions_report, build_report, render_text


# =============================================================================
# Terminal Output
# =============================================================================

class Colors:
    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[1;33m"
    NC = "\033[0m"


def print_warn(msg: str):
    print(f"{Colors.YELLOW}[WARN]{Colors.NC} {msg}", file=sys.stderr)


def print_error(msg: str):
    print(f"{Colors.RED}[ERROR]{Colors.NC} {msg}", file=sys.stderr)


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="callsite",
        description="Find call-sites of a symbol in s-expression source files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("symbol", nargs="?", help="Symbol to find callers of")
    parser.add_argument("paths", nargs="*", default=[], help="Files or directories to search (default: .)")

    # Modes
    parser.add_argument("--list-symbols", action="store_true", help="List symbols defined at top level and exit")
    parser.add_argument("--config", type=str, help="JSON configuration file path")

    # Discovery
    parser.add_argument("--ext", type=str, help="Comma-separated file extensions (e.g. .el,.scm)")
    parser.add_argument("--exclude", type=str, help="Comma-separated directory names to skip")

    # Search
    parser.add_argument("--by-position", action="store_true", help="Keep one span per occurrence instead of per value")
    parser.add_argument("--workers", type=int, help="Number of documents to read in parallel")

    # Output
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--log-level", type=str, help="Log level (default: WARNING)")
    parser.add_argument("--log-dir", type=str, help="Write run logs under this directory")

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> Config:
    """Create Config from environment, optional JSON file and CLI arguments"""
    config = Config.from_env()

    if args.config:
        config.merge(Config.from_json(args.config))

    if args.ext:
        config.extensions = [e.strip() for e in args.ext.split(",") if e.strip()]
    if args.exclude:
        config.exclude_dirs = [d.strip() for d in args.exclude.split(",") if d.strip()]
    if args.by_position:
        config.collapse_duplicates = False
    if args.workers is not None:
        config.workers = args.workers
    if args.json:
        config.output_format = "json"
    if args.log_level:
        config.log_level = args.log_level.upper()
    if args.log_dir:
        config.log_dir = args.log_dir

    return config


# =============================================================================
# Modes
# =============================================================================

def run_list_symbols(config: Config, paths: List[str]) -> int:
    """Print top-level definitions found under paths"""
    definitions = CallerSearcher(config).definitions(paths)

    if config.output_format == "json":
        reports = build_definitions_report(definitions)
        print(json.dumps([r.model_dump() for r in reports], indent=2))
    else:
        for d in definitions:
            print(f"{d.name}\t{d.kind}\t{d.document_id}")

    return 0 if definitions else 1


def run_search(config: Config, symbol_text: str, paths: List[str]) -> int:
    """Search paths for callers of symbol_text and print the results"""
    try:
        symbol = parse_symbol(symbol_text)
    except ValueError as e:
        print_error(str(e))
        return 2

    results = CallerSearcher(config).search(symbol, paths)
    report = build_report(symbol.name, results)

    if config.output_format == "json":
        print(report.model_dump_json(indent=2))
    elif results:
        print(render_text(report))
    else:
        print_warn(f"No calls to {symbol} found")

    return 0 if results else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point - routes to the requested mode"""
    args = parse_args(argv)

    try:
        config = create_config_from_args(args)
    except (OSError, ValueError) as e:
        print_error(f"Failed to load configuration: {e}")
        return 2

    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        return 2

    if args.list_symbols:
        # No symbol is taken in this mode, so every positional is a path
        paths = ([args.symbol] if args.symbol else []) + args.paths
        run_name = "definitions"
    else:
        paths = args.paths
        run_name = args.symbol or "callsite"
    paths = paths or ["."]

    if config.log_dir:
        setup_logging(
            run_name,
            Path(config.log_dir),
            console_level=config.log_level,
            metadata={
                "Paths": ", ".join(paths),
                "Extensions": ", ".join(config.extensions),
                "Span Mode": "by value" if config.collapse_duplicates else "by position",
                "Workers": config.workers,
            },
        )
    else:
        setup_console_only(config.log_level)

    logger.debug(f"Configuration: {config.to_dict()}")

    if args.list_symbols:
        return run_list_symbols(config, paths)

    if not args.symbol:
        print_error("A symbol is required (or use --list-symbols)")
        return 2

    return run_search(config, args.symbol, paths)


if __name__ == "__main__":
    sys.exit(main())
