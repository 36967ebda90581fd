"""Repository-wide summary shown in the header."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepoSummary:
    """Repository facts refreshed together with the worktree list."""
    remote_url: str = ""  # shortened to host/org/repo
    stash_count: int = 0
    fetched_ago: str = ""  # empty when the repo was never fetched
    default_branch: str = "main"
    has_commits: bool = False
    pr_lookup_available: bool = False
