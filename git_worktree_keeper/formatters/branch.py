"""Branch name formatting utilities."""

from git_worktree_keeper.constants import SYMBOL_CLEAN, Tone
from git_worktree_keeper.models.worktree import WorktreeEntry

_SEPARATORS = {"_", "-"}


def slugify(text: str) -> str:
    """
    Convert free text to a lower-case, hyphenated branch suffix.

    Whitespace, underscores and hyphens collapse into a single hyphen, '/'
    is kept so "area/topic" survives, and everything else that is not
    a-z or 0-9 is dropped.

    Args:
        text: Free text, typically a worktree display name

    Returns:
        Slug without leading or trailing separators

    Example:
        "Feat: Auth Refresh" -> "feat-auth-refresh"
        "a/b  c" -> "a/b-c"
    """
    out = []
    previous_was_separator = False
    for char in text.lower():
        if ("a" <= char <= "z") or ("0" <= char <= "9"):
            out.append(char)
            previous_was_separator = False
        elif char == "/":
            out.append(char)
            previous_was_separator = False
        elif char.isspace() or char in _SEPARATORS:
            if out and not previous_was_separator:
                out.append("-")
                previous_was_separator = True
    return "".join(out).rstrip("-/")


def default_branch_name(branch_type: str, display_name: str) -> str:
    """Derive "type/slug" from a branch type and a display name."""
    slug = slugify(display_name)
    if not slug:
        return branch_type
    return f"{branch_type}/{slug}"


def worktree_dir_name(branch: str) -> str:
    """Directory name used for a branch's worktree."""
    return branch.replace("/", "-")


def format_worktree_status(worktree: WorktreeEntry) -> list:
    """
    Format dirty/clean state as (text, tone) parts.

    Args:
        worktree: Worktree entry

    Returns:
        List of (text, tone) tuples, e.g. [("●", danger), (" 2 changed", default)]
    """
    if not worktree.is_dirty:
        return [(f"{SYMBOL_CLEAN} clean", Tone.OK)]

    parts = []
    if worktree.changed_count > 0:
        parts.append(("●", Tone.DANGER))
        parts.append((f" {worktree.changed_count} changed", Tone.DEFAULT))
    if worktree.untracked_count > 0:
        if parts:
            parts.append(("  ", Tone.DIM))
        parts.append((f"{worktree.untracked_count} untracked", Tone.DEFAULT))
    return parts
