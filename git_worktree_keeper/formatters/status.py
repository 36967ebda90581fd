"""Sync status formatting utilities."""

from typing import Tuple

from git_worktree_keeper.constants import SYMBOL_CLEAN, Tone
from git_worktree_keeper.models.worktree import WorktreeEntry


def format_sync_status(worktree: WorktreeEntry, default_branch: str) -> Tuple[str, str]:
    """
    Format ahead/behind counts against the default branch.

    Args:
        worktree: Worktree entry
        default_branch: Name of the default branch ("main" when unknown)

    Returns:
        Tuple of (text, tone)
    """
    default_branch = default_branch or "main"
    ahead, behind = worktree.ahead, worktree.behind
    if ahead > 0 and behind > 0:
        return f"↑{ahead} ↓{behind} diverged from {default_branch}", Tone.WARNING
    if ahead > 0:
        return f"↑{ahead} ahead of {default_branch}", Tone.DEFAULT
    if behind > 0:
        return f"↓{behind} behind {default_branch}", Tone.WARNING
    if worktree.is_merged:
        return f"{SYMBOL_CLEAN} merged into {default_branch}", Tone.OK
    return f"{SYMBOL_CLEAN} up to date with {default_branch}", Tone.OK
