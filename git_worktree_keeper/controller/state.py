"""Application state.

The state is a frozen value. Shared data (worktrees, summary, cursor, PR
cache, viewport, error banner) lives on AppState; everything that belongs to
one mode lives on that mode's view dataclass, and the type of the view is
the mode tag. Entering a mode always builds a new view, so values from an
earlier visit can never leak into the next one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple, Union

from git_worktree_keeper.constants import BRANCH_TYPES
from git_worktree_keeper.models.commit import CommitDetail
from git_worktree_keeper.models.pull_request import PRBadge
from git_worktree_keeper.models.repository import RepoSummary
from git_worktree_keeper.models.worktree import WorktreeEntry


class Mode(Enum):
    """The closed set of application modes."""
    NO_REPOSITORY = "no_repository"
    FIRST_RUN_PROMPT = "first_run_prompt"
    LIST = "list"
    CREATE_MODAL = "create_modal"
    RENAME_MODAL = "rename_modal"
    DELETE_CONFIRM = "delete_confirm"
    DETAIL_FOCUSED = "detail_focused"
    DETAIL_OVERLAY = "detail_overlay"


class CreateField(IntEnum):
    """Fields of the create form, in tab order."""
    TYPE = 0
    NAME = 1
    BRANCH = 2
    DESCRIPTION = 3


@dataclass(frozen=True)
class NoRepositoryView:
    mode = Mode.NO_REPOSITORY
    checked: bool = False  # False until the startup check has answered


@dataclass(frozen=True)
class FirstRunPromptView:
    mode = Mode.FIRST_RUN_PROMPT


@dataclass(frozen=True)
class ListView:
    mode = Mode.LIST


@dataclass(frozen=True)
class CreateModalView:
    mode = Mode.CREATE_MODAL
    type_index: int = 0
    picker_open: bool = False
    picker_index: int = 0  # highlighted row while the picker is open
    display_name: str = ""
    branch: str = ""
    description: str = ""
    active_field: CreateField = CreateField.TYPE
    branch_edited: bool = False  # once True the branch is never re-derived


@dataclass(frozen=True)
class RenameModalView:
    mode = Mode.RENAME_MODAL
    name: str = ""


@dataclass(frozen=True)
class DeleteConfirmView:
    mode = Mode.DELETE_CONFIRM


@dataclass(frozen=True)
class DetailFocusedView:
    mode = Mode.DETAIL_FOCUSED
    commit_index: int = 0


@dataclass(frozen=True)
class DetailOverlayView:
    mode = Mode.DETAIL_OVERLAY
    commit_index: int
    detail: CommitDetail
    scroll: int = 0


View = Union[
    NoRepositoryView,
    FirstRunPromptView,
    ListView,
    CreateModalView,
    RenameModalView,
    DeleteConfirmView,
    DetailFocusedView,
    DetailOverlayView,
]


@dataclass(frozen=True)
class AppState:
    """Everything the renderer needs to draw one frame."""

    view: View = field(default_factory=NoRepositoryView)
    worktrees: Tuple[WorktreeEntry, ...] = ()
    summary: RepoSummary = field(default_factory=RepoSummary)
    cursor: int = 0  # 0 = "+ new worktree", 1..N = worktrees[cursor - 1]
    pr_cache: Dict[str, Optional[PRBadge]] = field(default_factory=dict)
    branch_types: Tuple[str, ...] = tuple(BRANCH_TYPES)
    width: int = 0
    height: int = 0
    error: Optional[str] = None
    quitting: bool = False

    @property
    def mode(self) -> Mode:
        return self.view.mode

    @property
    def selected(self) -> Optional[WorktreeEntry]:
        """The worktree under the cursor, or None on the "+ new worktree" row."""
        index = self.cursor - 1
        if 0 <= index < len(self.worktrees):
            return self.worktrees[index]
        return None

    def with_view(self, view: View) -> "AppState":
        return replace(self, view=view)

    def with_error(self, error: Optional[str]) -> "AppState":
        return replace(self, error=error)
