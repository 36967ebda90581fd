"""Pull request badge model."""

from dataclasses import dataclass
from enum import Enum


class PRState(Enum):
    """State of a pull request."""
    OPEN = "open"
    MERGED = "merged"
    CLOSED = "closed"


@dataclass(frozen=True)
class PRBadge:
    """PR shown next to a worktree title.

    The PR cache maps branch name to Optional[PRBadge]: a missing key means
    the branch was never looked up, None means no PR was found.
    """
    state: PRState
    number: int
    url: str = ""
