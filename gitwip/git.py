"""Git queries — subprocess-based, one call per question."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from gitwip.parse import (
    branch_findings,
    parse_branches,
    parse_stash,
    parse_status,
    parse_upstreams,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60

LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


class GitWipError(Exception):
    """Base class for gitwip errors."""


class GitNotFoundError(GitWipError):
    """The git executable is not on PATH."""


class GitCommandError(GitWipError):
    """A git command exited non-zero or timed out."""

    def __init__(self, args: list[str], returncode: Optional[int], stderr: str = "") -> None:
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        if returncode is None:
            msg = f"git {' '.join(args)} timed out"
        else:
            msg = f"git {' '.join(args)} failed (exit {returncode})"
        if self.stderr:
            msg = f"{msg}: {self.stderr.splitlines()[0]}"
        super().__init__(msg)


@dataclass
class RepoWip:
    path: str
    name: str
    findings: list[str] = field(default_factory=list)
    error: Optional[str] = None


def run_git(repo_path: str, args: list[str], timeout: int = DEFAULT_TIMEOUT) -> list[str]:
    """Run a git command in repo_path and return its stdout as lines."""
    try:
        result = subprocess.run(
            ["git"] + args,
            cwd=repo_path,
            capture_output=True,
            text=True,
            timeout=timeout,
            errors="replace",
        )
    except subprocess.TimeoutExpired as exc:
        raise GitCommandError(args, None) from exc
    except FileNotFoundError as exc:
        # Popen reports a missing cwd the same way as a missing executable
        if not os.path.isdir(repo_path):
            raise GitCommandError(args, None, f"no such directory: {repo_path}") from exc
        raise GitNotFoundError("git executable not found on PATH") from exc
    except OSError as exc:
        raise GitCommandError(args, None, str(exc)) from exc

    if result.returncode != 0:
        raise GitCommandError(args, result.returncode, result.stderr)
    return split_lines(result.stdout)


def split_lines(text: str) -> list[str]:
    """Split on \\r\\n, \\r or \\n only; other separators stay inside the line."""
    lines = LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def get_status(repo_path: str, timeout: int = DEFAULT_TIMEOUT) -> list[str]:
    lines = run_git(repo_path, ["status", "--porcelain", "--untracked-files=all"], timeout)
    return parse_status(lines)


def get_branches(
    repo_path: str,
    no_merged: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> list[str]:
    args = ["branch", "-vv"]
    if no_merged:
        args += ["--no-merged", no_merged]
    lines = run_git(repo_path, args, timeout)
    upstreams = parse_upstreams(run_git(
        repo_path,
        ["for-each-ref", "refs/heads", "--format=%(refname:short) %(upstream:short)"],
        timeout,
    ))
    return branch_findings(parse_branches(lines, upstreams))


def get_stash(repo_path: str, timeout: int = DEFAULT_TIMEOUT) -> list[str]:
    return parse_stash(run_git(repo_path, ["stash", "list"], timeout))


def wip(
    repo_path: str,
    no_merged: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT,
    errors: Optional[list[str]] = None,
) -> list[str]:
    """Collect the unfinished work in one repository.

    Findings come in a fixed order: working-tree status lines as git emits
    them, then branch findings sorted by branch name, then the stash line.

    A failing query raises ``GitCommandError``, unless an ``errors`` list is
    given: then the failure is appended to it and the remaining queries
    still run.
    """
    queries: list[Callable[[], list[str]]] = [
        lambda: get_status(repo_path, timeout),
        lambda: get_branches(repo_path, no_merged, timeout),
        lambda: get_stash(repo_path, timeout),
    ]
    findings: list[str] = []
    for query in queries:
        try:
            findings += query()
        except GitCommandError as exc:
            if errors is None:
                raise
            errors.append(str(exc))
    return findings


def scan_repo(
    repo_path: str,
    no_merged: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> RepoWip:
    """Scan one repo, recording git failures instead of raising them.

    Findings from the queries that did succeed are kept.
    """
    info = RepoWip(path=repo_path, name=Path(repo_path).name)
    logger.debug("Scanning %s", repo_path)
    errors: list[str] = []
    info.findings = wip(repo_path, no_merged, timeout, errors=errors)
    for err in errors:
        logger.warning("%s: %s", info.name, err)
    if errors:
        info.error = "; ".join(errors)
    return info
