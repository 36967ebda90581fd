"""Commit data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class DiffLineKind(Enum):
    """Category of a single patch line."""
    FILE_HEADER = "diff"
    METADATA = "meta"
    HUNK_HEADER = "@@"
    ADDED = "+"
    REMOVED = "-"
    CONTEXT = " "


@dataclass(frozen=True)
class CommitSummary:
    """One entry of a worktree's recent history."""
    short_hash: str
    subject: str
    relative_time: str


@dataclass(frozen=True)
class CommitFileChange:
    """A file touched by a commit."""
    status: str  # single letter: A, M, D, R (C, T, U pass through)
    path: str  # destination path for renames and copies


@dataclass(frozen=True)
class DiffLine:
    """A patch line and its category; content is kept verbatim."""
    kind: DiffLineKind
    content: str


@dataclass(frozen=True)
class CommitDetail:
    """Full commit data shown in the commit overlay."""
    short_hash: str
    subject: str
    body: str = ""
    relative_time: str = ""
    files: Tuple[CommitFileChange, ...] = ()
    diff: Tuple[DiffLine, ...] = ()
    loaded: bool = False  # False until the background fetch completes

    @classmethod
    def placeholder(cls, summary: CommitSummary) -> "CommitDetail":
        """Build an unloaded detail from what the commit list already knows."""
        return cls(
            short_hash=summary.short_hash,
            subject=summary.subject,
            relative_time=summary.relative_time,
        )
