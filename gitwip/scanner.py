"""Repo discovery — find git repositories below or above a directory."""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

GIT_DIR = ".git"

SKIP_DIRS = frozenset({
    "node_modules", ".venv", "venv", "__pycache__", "target", "build",
    "dist", ".gradle", ".dart_tool", "vendor", ".next", ".nuxt",
    "bin", "obj", ".tox", ".mypy_cache", ".ruff_cache", ".pytest_cache",
    "site-packages", ".cargo", ".rustup", "Pods",
})

# Well-known directories under $HOME that are big and never hold work in progress
PLATFORM_SKIP_DIRS: dict[str, tuple[str, ...]] = {
    "darwin": ("Library", "Music", "Movies", "Pictures", ".Trash"),
    "linux": (".cache", os.path.join(".local", "share", "Trash"), "snap", "Music", "Pictures", "Videos"),
    "win32": ("AppData", "Music", "Pictures", "Videos"),
}

MatchFn = Callable[[str, list[str]], bool]
ExcludeFn = Callable[[str, str], bool]
ErrorFn = Callable[[str, OSError], None]


def _warn(path: str, exc: OSError) -> None:
    logger.warning("Skipping %s: %s", path, exc.strerror or exc)


def walk(
    root: str,
    is_match: MatchFn,
    is_excluded: ExcludeFn,
    on_error: Optional[ErrorFn] = None,
    max_depth: Optional[int] = None,
) -> list[str]:
    """Walk root depth-first and collect the directories that match.

    ``is_match(path, names)`` sees each directory with the names it contains;
    a match is recorded and not descended into. ``is_excluded(parent, name)``
    prunes a subdirectory without recording it. Unreadable directories go to
    ``on_error`` and the walk carries on.
    """
    on_error = on_error or _warn
    matches: list[str] = []

    def _walk(path: str, depth: int) -> None:
        if max_depth is not None and depth > max_depth:
            return
        try:
            entries = list(os.scandir(path))
        except OSError as exc:
            on_error(path, exc)
            return

        if is_match(path, [e.name for e in entries]):
            matches.append(path)
            return

        for entry in entries:
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError as exc:
                on_error(entry.path, exc)
                continue
            if is_excluded(path, entry.name):
                logger.debug("Excluded %s", entry.path)
                continue
            _walk(entry.path, depth + 1)

    _walk(root, 0)
    return matches


def is_repo_dir(path: str, names: list[str]) -> bool:
    # .git may be a file in worktrees and submodules
    return GIT_DIR in names


def default_excludes(home: Optional[str] = None, platform: str = sys.platform) -> ExcludeFn:
    """Skip build output, hidden dirs and the platform's bulky home dirs."""
    home = os.path.abspath(os.path.expanduser(home or "~"))
    key = "linux" if platform.startswith("linux") else platform
    skip_paths = frozenset(os.path.join(home, p) for p in PLATFORM_SKIP_DIRS.get(key, ()))

    def _excluded(parent: str, name: str) -> bool:
        if name.startswith(".") or name in SKIP_DIRS:
            return True
        return os.path.join(parent, name) in skip_paths

    return _excluded


def find_repos(
    roots: Iterable[str],
    max_depth: Optional[int] = None,
    excludes: Optional[ExcludeFn] = None,
    on_error: Optional[ErrorFn] = None,
) -> list[str]:
    """Find all git repositories under each root.

    Returns a sorted, de-duplicated list of absolute paths. Nothing below a
    found repository is searched.
    """
    excludes = excludes or default_excludes()
    repos: set[str] = set()
    for root in roots:
        root = os.path.abspath(os.path.expanduser(root))
        if not os.path.isdir(root):
            continue
        repos.update(walk(root, is_repo_dir, excludes, on_error, max_depth))
    return sorted(repos)


def find_enclosing_repo(path: str) -> Optional[str]:
    """Return the deepest repository root containing path, or None."""
    current = os.path.realpath(os.path.expanduser(path))
    while True:
        if os.path.exists(os.path.join(current, GIT_DIR)):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent
