"""
Command-line interface for the outdated-package check.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional
from urllib.parse import parse_qsl

from .checker import Checker, has_failures
from .config import DEFAULT_REGISTRY_URL, CheckerConfig
from .manifests import PROJECT_FILE_SUFFIX
from .models import IgnoreEntry
from .reporting import export_results_csv, print_summary, save_results_json


logger = logging.getLogger(__name__)

_TRUE_VALUES = {"true", "1", "yes", "y", "on"}
_FALSE_VALUES = {"false", "0", "no", "n", "off"}


def parse_bool(value: str) -> bool:
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def parse_ignore_query(query: str) -> List[IgnoreEntry]:
    """Parse ``"ProjectA=PkgX&ProjectB=PkgY"`` into ignore entries.

    Keys may be project file names; a trailing ``.csproj`` is dropped so
    ``App.csproj=Serilog`` and ``App=Serilog`` mean the same thing.
    """
    entries = []
    if not query or not query.strip():
        return entries

    for project, package in parse_qsl(query):
        project, package = project.strip(), package.strip()
        if not project or not package:
            continue
        if project.lower().endswith(PROJECT_FILE_SUFFIX):
            project = project[: -len(PROJECT_FILE_SUFFIX)]
        entries.append(IgnoreEntry(project=project, package=package))
    return entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nuget-outdated",
        description="Report outdated NuGet packages in .csproj files and fail when any are found",
    )

    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Directory to scan recursively. Default: current directory"
    )

    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="QUERY",
        help='Project/package pairs that never fail the check, e.g. "ProjectA=PkgX&ProjectB=PkgY". '
             "May be repeated"
    )

    parser.add_argument(
        "--includeprerelease",
        dest="include_prerelease",
        action="store_true",
        help="Compare against prerelease versions too"
    )

    parser.add_argument(
        "--includeprelease",
        dest="include_prerelease",
        type=parse_bool,
        metavar="BOOL",
        help="Same as --includeprerelease, with an explicit true/false value"
    )

    parser.add_argument(
        "--registry-url",
        default=DEFAULT_REGISTRY_URL,
        help="Package index URL template with a {package_id} placeholder. "
             "Default: the nuget.org flat container"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP timeout in seconds. Default: 30"
    )

    parser.add_argument(
        "--retries",
        type=int,
        default=3,
        help="Attempts per registry lookup on connection errors. Default: 3"
    )

    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Number of project files checked in parallel"
    )

    parser.add_argument(
        "--csv",
        default=None,
        help="Also write the results to this CSV file"
    )

    parser.add_argument(
        "--json",
        default=None,
        help="Also write the results to this JSON file"
    )

    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while checking projects"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.max_workers is not None and args.max_workers < 1:
        parser.error("--max-workers must be at least 1")
    if args.retries < 1:
        parser.error("--retries must be at least 1")
    if "{package_id}" not in args.registry_url:
        parser.error("--registry-url must contain a {package_id} placeholder")

    configure_logging(args.verbose, args.quiet)

    directory = Path(args.directory) if args.directory else Path.cwd()
    ignore_list = [entry for query in args.ignore for entry in parse_ignore_query(query)]

    config = CheckerConfig(
        registry_url=args.registry_url,
        timeout=args.timeout,
        retries=args.retries,
        max_workers=args.max_workers,
        show_progress=args.progress,
    )

    logger.info("Checking packages in %s...", directory)
    results = Checker(config=config).check(
        directory,
        ignore_list,
        include_prerelease=args.include_prerelease,
    )

    print_summary(results)

    if args.csv:
        export_results_csv(results, Path(args.csv))
    if args.json:
        save_results_json(results, Path(args.json))

    return 1 if has_failures(results) else 0


if __name__ == "__main__":
    sys.exit(main())
