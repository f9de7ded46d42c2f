"""Shared visual constants and helpers for gitwip."""

from __future__ import annotations

from rich.text import Text

from gitwip.parse import STASH_FINDING

# ── Color Palette (GitHub Dark + Neon Accents) ──────────────────────────

MUTED = "#8b949e"
CYAN = "#58a6ff"
GREEN = "#39d353"
PURPLE = "#bc8cff"
YELLOW = "#e3b341"
RED = "#f85149"
ORANGE = "#f0883e"

BRANCH_SUFFIXES = ("is not tracking a remote branch.", "commits.")

# Porcelain status codes (first column) → color
STATUS_COLORS: dict[str, str] = {
    "M": YELLOW,
    "A": GREEN,
    "D": RED,
    "R": PURPLE,
    "C": PURPLE,
    "U": RED,
    "?": MUTED,
}


def finding_style(finding: str) -> str:
    """Pick a color for one finding line."""
    if finding == STASH_FINDING:
        return PURPLE
    if finding.endswith(BRANCH_SUFFIXES):
        return ORANGE
    code = finding[:2].strip()[:1]
    return STATUS_COLORS.get(code, YELLOW)


def render_repo(name: str, findings: list[str]) -> Text:
    """Repo name on its own line, findings indented two spaces below it."""
    text = Text()
    text.append(name, style=f"bold {CYAN}")
    for finding in findings:
        text.append("\n  ")
        text.append(finding, style=finding_style(finding))
    return text
