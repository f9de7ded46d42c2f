"""Decide where to look: explicit paths, $GITWIP_ROOTS, the current repo or $HOME."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from gitwip.scanner import find_enclosing_repo

ENV_ROOTS = "GITWIP_ROOTS"


@dataclass
class SearchPlan:
    mode: str
    roots: list[str] = field(default_factory=list)
    repo: Optional[str] = None


def _existing_dirs(paths: Sequence[str]) -> list[str]:
    dirs = []
    for p in paths:
        p = os.path.abspath(os.path.expanduser(p))
        if os.path.isdir(p):
            dirs.append(p)
    return dirs


def resolve_search(
    paths: Sequence[str],
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
    home: Optional[str] = None,
) -> SearchPlan:
    """Pick search roots, in priority order.

    Explicit paths win, even when none of them exist. Then the
    whitespace-separated list in $GITWIP_ROOTS. With neither, the repository
    around the cwd is used on its own, or failing that the home directory.
    """
    environ = os.environ if environ is None else environ
    if paths:
        return SearchPlan("args", _existing_dirs(paths))

    env_roots = environ.get(ENV_ROOTS, "").split()
    if env_roots:
        return SearchPlan("env", _existing_dirs(env_roots))

    repo = find_enclosing_repo(cwd or os.getcwd())
    if repo:
        return SearchPlan("current", repo=repo)
    return SearchPlan("home", [os.path.abspath(os.path.expanduser(home or "~"))])
