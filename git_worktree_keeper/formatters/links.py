"""Pull request badge formatting utilities."""

from typing import Optional, Tuple

from git_worktree_keeper.constants import Tone
from git_worktree_keeper.models.pull_request import PRBadge, PRState

_BADGES = {
    PRState.OPEN: ("● open  #{number}", Tone.PR_OPEN),
    PRState.MERGED: ("✓ merged  #{number}", Tone.PR_MERGED),
    PRState.CLOSED: ("✗ closed  #{number}", Tone.PR_CLOSED),
}


def format_pr_badge(badge: Optional[PRBadge]) -> Tuple[str, str]:
    """
    Format a cached PR lookup result.

    Args:
        badge: PR badge, or None when the lookup found no PR

    Returns:
        Tuple of (text, tone)
    """
    if badge is None:
        return "no PR", Tone.PR_NONE
    template, tone = _BADGES[badge.state]
    return template.format(number=badge.number), tone
