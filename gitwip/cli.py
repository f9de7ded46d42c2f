"""CLI entry point for gitwip."""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
from typing import Optional, Sequence

from gitwip import __version__
from gitwip.config import ENV_ROOTS, SearchPlan, resolve_search
from gitwip.git import DEFAULT_TIMEOUT, GitNotFoundError, RepoWip, scan_repo
from gitwip.scanner import find_repos

logger = logging.getLogger(__name__)

EXIT_GIT_NOT_FOUND = 127


def _setup_logging(verbose: bool) -> None:
    """Send gitwip's log records to stderr through rich."""
    from rich.console import Console
    from rich.logging import RichHandler

    pkg_logger = logging.getLogger("gitwip")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.addHandler(RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    ))
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _repo_paths(plan: SearchPlan, max_depth: Optional[int] = None) -> list[str]:
    if plan.repo:
        return [plan.repo]
    return find_repos(plan.roots, max_depth=max_depth)


def _scan_all(
    plan: SearchPlan,
    *,
    no_merged: Optional[str] = None,
    max_depth: Optional[int] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> list[RepoWip]:
    """Scan every repo in the plan, one after another."""
    repo_paths = _repo_paths(plan, max_depth)
    logger.info("Found %d repos (%s mode)", len(repo_paths), plan.mode)
    return [scan_repo(p, no_merged=no_merged, timeout=timeout) for p in repo_paths]


def print_report(repos: list[RepoWip]) -> None:
    """Print each repo with findings; clean repos print nothing."""
    from rich.console import Console

    from gitwip.theme import render_repo

    console = Console()
    for r in repos:
        if r.findings:
            console.print(render_repo(r.name, r.findings), soft_wrap=True)


def print_json(plan: SearchPlan, repos: list[RepoWip]) -> None:
    """Dump findings as JSON to stdout."""
    data = {
        "mode": plan.mode,
        "roots": [plan.repo] if plan.repo else plan.roots,
        "repos": [
            {
                "name": r.name,
                "path": r.path,
                "findings": r.findings,
                "error": r.error,
            }
            for r in repos
            if r.findings or r.error
        ],
    }
    print(json.dumps(data, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitwip",
        description="Find uncommitted changes, unpushed branches and stashes in your git repos.",
        epilog=(
            f"With no PATH, the whitespace-separated directories in ${ENV_ROOTS} are searched. "
            "Without that either, only the repo around the current directory is checked, "
            "or your home directory is searched when you're not inside one."
        ),
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Directories to search for git repos",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output findings as JSON",
    )
    parser.add_argument(
        "--no-merged",
        metavar="BRANCH",
        help="Only report branches not yet merged into BRANCH",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        metavar="N",
        help="Don't search more than N directories deep (default: unlimited)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=f"Give up on a git command after this long (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each repo scanned and each directory skipped",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"gitwip {__version__}",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the gitwip CLI."""
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    if shutil.which("git") is None:
        logger.error("git was not found on your PATH; gitwip needs it to inspect repositories.")
        return EXIT_GIT_NOT_FOUND

    plan = resolve_search(args.paths)
    try:
        repos = _scan_all(
            plan,
            no_merged=args.no_merged,
            max_depth=args.max_depth,
            timeout=args.timeout,
        )
    except GitNotFoundError as exc:
        logger.error("%s", exc)
        return EXIT_GIT_NOT_FOUND

    if args.json_output:
        print_json(plan, repos)
    else:
        print_report(repos)
    return 0


if __name__ == "__main__":
    sys.exit(main())
