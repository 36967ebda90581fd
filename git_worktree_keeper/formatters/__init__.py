"""Formatting utilities for git-worktree-keeper.

This package provides the text helpers used by the renderer, organized
into logical modules:
- text: Width-aware truncation, padding and word wrap
- branch: Branch slugs and worktree status
- date: Relative time formatting
- status: Ahead/behind sync formatting
- links: PR badge formatting
"""

# Text layout
from .text import truncate, pad_right, wrap_words

# Branch formatters
from .branch import (
    slugify,
    default_branch_name,
    worktree_dir_name,
    format_worktree_status,
)

# Date formatters
from .date import format_relative_duration

# Status formatters
from .status import format_sync_status

# Link formatters
from .links import format_pr_badge

__all__ = [
    # Text
    "truncate",
    "pad_right",
    "wrap_words",
    # Branch
    "slugify",
    "default_branch_name",
    "worktree_dir_name",
    "format_worktree_status",
    # Date
    "format_relative_duration",
    # Status
    "format_sync_status",
    # Links
    "format_pr_badge",
]
