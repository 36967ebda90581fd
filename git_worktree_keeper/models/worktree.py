"""Worktree data models."""

from dataclasses import dataclass
from typing import Optional, Tuple

from git_worktree_keeper.models.commit import CommitSummary


@dataclass(frozen=True)
class WorktreeInfo:
    """A worktree as reported by `git worktree list --porcelain`."""

    path: str
    branch_name: str  # empty when detached or bare
    commit_sha: str
    is_main: bool  # Is this the main working tree?
    is_detached: bool = False
    is_bare: bool = False

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch_name or self.commit_sha[:7]} @ {self.path}{main_marker}"


@dataclass(frozen=True)
class WorktreeEntry:
    """A worktree as listed in the left pane, with its detail pane data."""

    name: str  # display name (metadata, else branch, else directory name)
    path: str
    branch: str
    is_main: bool = False  # Is this the main working tree?
    updated_at: str = ""  # relative time of the last commit
    description: str = ""
    created_from: str = ""  # short SHA of HEAD when the worktree was created
    ahead: int = 0
    behind: int = 0
    is_merged: bool = False
    commits: Tuple[CommitSummary, ...] = ()
    head_sha: str = ""
    changed_count: int = 0
    untracked_count: int = 0

    @property
    def is_dirty(self) -> bool:
        return self.changed_count > 0 or self.untracked_count > 0

    def commit_at(self, index: int) -> Optional[CommitSummary]:
        """Return the commit at index, or None when out of range."""
        if 0 <= index < len(self.commits):
            return self.commits[index]
        return None

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch} @ {self.path}{main_marker}"
