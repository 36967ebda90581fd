"""Git-related services for git-worktree-keeper."""

from .operations import GitOperations, git_error, shorten_remote_url
from .worktrees import WorktreeService, parse_worktree_porcelain, parse_status_counts
from .commits import CommitQueries, parse_commit_log, parse_name_status, parse_patch

__all__ = [
    "GitOperations",
    "WorktreeService",
    "CommitQueries",
    "git_error",
    "shorten_remote_url",
    "parse_worktree_porcelain",
    "parse_status_counts",
    "parse_commit_log",
    "parse_name_status",
    "parse_patch",
]
