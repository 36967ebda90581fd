"""Shared constants for git-worktree-keeper."""

from typing import List

APP_NAME = "⎇  worktree"

# Executable name, also what the shell wrapper runs
PROGRAM_NAME = "git-worktree-keeper"

# Branch types offered by the type picker, first one is the default
BRANCH_TYPES: List[str] = [
    "feat",
    "fix",
    "chore",
    "docs",
    "refactor",
    "test",
    "style",
    "ci",
    "perf",
    "release",
]

# Commits shown per worktree in the detail pane
COMMIT_LIMIT = 10

# New worktrees live under <repo root>/<WORKTREE_DIR_NAME>/<branch slug>
WORKTREE_DIR_NAME = ".wt"

NEW_WORKTREE_LABEL = "+ new worktree"
NO_COMMITS_HINT = "no commits yet"

DETACHED_LABEL = "(detached)"
BARE_LABEL = "(bare)"
NEVER_UPDATED = "never"

# Layout
LEFT_PANE_MIN_WIDTH = 22
PANE_GUTTER = 2
OVERLAY_WIDTH_PERCENT = 80
OVERLAY_HEIGHT_PERCENT = 80
OVERLAY_MIN_WIDTH = 40
OVERLAY_MIN_HEIGHT = 10

# Symbol constants
SYMBOL_SELECTED = "▌"
SYMBOL_BULLET = "●"
SYMBOL_INDICATOR = "◎"
SYMBOL_STASH = "✦"
SYMBOL_CLEAN = "✓"
SYMBOL_ELLIPSIS = "…"
SYMBOL_CURSOR = "█"
SYMBOL_RULE = "─"
SEPARATOR = " · "

SHELL_FUNCTION_NAME = "wt"


class Tone:
    """Semantic color roles, resolved to concrete styles by the palette."""

    DEFAULT = "default"
    DIM = "dim"
    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"
    PR_OPEN = "pr_open"
    PR_MERGED = "pr_merged"
    PR_CLOSED = "pr_closed"
    PR_NONE = "pr_none"
