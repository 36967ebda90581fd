"""Domain models for git-worktree-keeper."""

from .commit import CommitDetail, CommitFileChange, CommitSummary, DiffLine, DiffLineKind
from .pull_request import PRBadge, PRState
from .repository import RepoSummary
from .worktree import WorktreeEntry, WorktreeInfo

__all__ = [
    "CommitDetail",
    "CommitFileChange",
    "CommitSummary",
    "DiffLine",
    "DiffLineKind",
    "PRBadge",
    "PRState",
    "RepoSummary",
    "WorktreeEntry",
    "WorktreeInfo",
]
