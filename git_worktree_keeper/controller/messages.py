"""Events consumed by the state machine.

Input events come from the terminal; completion messages come back from
dispatched commands. Failures travel inside the message as an error string,
and every result carries the identifier it belongs to (branch, path, hash)
so a late answer can be matched without looking at the current cursor.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from git_worktree_keeper.models.commit import CommitDetail
from git_worktree_keeper.models.pull_request import PRBadge
from git_worktree_keeper.models.repository import RepoSummary
from git_worktree_keeper.models.worktree import WorktreeEntry


@dataclass(frozen=True)
class KeyPressed:
    key: str  # Textual key name, e.g. "up", "enter", "shift+tab", "a"
    character: Optional[str] = None  # printable character, if any


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class RepositoryChecked:
    is_repository: bool
    first_run_done: bool = True


@dataclass(frozen=True)
class WorktreesLoaded:
    worktrees: Tuple[WorktreeEntry, ...] = ()
    summary: Optional[RepoSummary] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class CommitDetailLoaded:
    commit_hash: str  # the hash that was requested
    detail: Optional[CommitDetail] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class PRStatusFetched:
    branch: str
    badge: Optional[PRBadge] = None  # None = no PR


@dataclass(frozen=True)
class RepositoryInitialized:
    error: Optional[str] = None


@dataclass(frozen=True)
class FirstRunCompleted:
    error: Optional[str] = None


@dataclass(frozen=True)
class WorktreeCreated:
    branch: str
    error: Optional[str] = None


@dataclass(frozen=True)
class WorktreeDeleted:
    path: str
    error: Optional[str] = None


@dataclass(frozen=True)
class BranchRenamed:
    old_name: str
    new_name: str
    error: Optional[str] = None
