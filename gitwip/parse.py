"""Parsers for porcelain status, verbose branch and stash listings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

STASH_FINDING = "There are stashed changes."

# "* main  1a2b3c4 [origin/main: ahead 3] subject"
# "+ wt    1a2b3c4 (/path/to/wt) [origin/wt] subject"   (checked out in another worktree)
BRANCH_RE = re.compile(
    r"^(?P<current>[*+])?\s*"
    r"(?P<name>[^\s(]\S*)\s+"
    r"(?P<sha>[0-9a-f]{4,64})\b"
    r"(?:\s+\((?P<worktree>[^)]*)\))?"
    r"(?:\s+\[(?P<remote>[^\]]*)\])?"
)
AHEAD_RE = re.compile(r"\bahead (\d+)")


@dataclass(frozen=True)
class BranchState:
    """Tracking state of a local branch.

    Untracked: ``tracking`` is False. UpToDate: tracking with ``ahead == 0``.
    Ahead(n): tracking with ``ahead == n``.
    """

    tracking: bool
    ahead: int = 0

    @property
    def is_untracked(self) -> bool:
        return not self.tracking

    @property
    def is_ahead(self) -> bool:
        return self.tracking and self.ahead > 0


UNTRACKED = BranchState(tracking=False)
UP_TO_DATE = BranchState(tracking=True)


def parse_status(lines: list[str]) -> list[str]:
    """Each porcelain status line is one finding, verbatim."""
    return [line for line in lines if line.strip()]


def parse_stash(lines: list[str]) -> list[str]:
    """Only presence matters; the stash entries themselves are dropped."""
    if any(line.strip() for line in lines):
        return [STASH_FINDING]
    return []


def parse_upstreams(lines: list[str]) -> dict[str, str]:
    """Map branch name to its configured upstream.

    Expects ``git for-each-ref refs/heads --format='%(refname:short) %(upstream:short)'``;
    branches without an upstream are left out. Ref names can't hold spaces.
    """
    upstreams: dict[str, str] = {}
    for line in lines:
        name, _, upstream = line.strip().partition(" ")
        if name and upstream:
            upstreams[name] = upstream
    return upstreams


def parse_branches(
    lines: list[str],
    upstreams: Optional[dict[str, str]] = None,
) -> dict[str, BranchState]:
    """Map branch name to tracking state from ``git branch -vv`` output.

    Lines that don't look like a local branch (detached HEAD, blank lines)
    are skipped. With ``upstreams``, a bracket only counts as tracking info
    when it names the branch's configured upstream, so a subject such as
    ``[WIP] half done`` on an untracked branch isn't mistaken for one.
    """
    states: dict[str, BranchState] = {}
    for line in lines:
        m = BRANCH_RE.match(line)
        if not m:
            continue
        name = m.group("name")
        remote = m.group("remote")
        if remote is not None and upstreams is not None:
            if remote.split(":", 1)[0] != upstreams.get(name):
                remote = None
        if remote is None:
            state = UNTRACKED
        else:
            ahead = AHEAD_RE.search(remote)
            state = BranchState(tracking=True, ahead=int(ahead.group(1))) if ahead else UP_TO_DATE
        states[name] = state
    return states


def branch_findings(states: dict[str, BranchState]) -> list[str]:
    findings: list[str] = []
    for name in sorted(states):
        state = states[name]
        if state.is_untracked:
            findings.append(f"{name} is not tracking a remote branch.")
        elif state.is_ahead:
            findings.append(f"{name} is ahead of its remote branch by {state.ahead} commits.")
    return findings
