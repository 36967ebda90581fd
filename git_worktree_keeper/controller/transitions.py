"""State transitions.

transition(state, event) is the only place the application state changes.
It is a pure function: it returns the next state and at most one command
for the dispatcher, and never performs I/O itself.
"""

from dataclasses import replace
from typing import NamedTuple, Optional, Sequence

from git_worktree_keeper.constants import BRANCH_TYPES
from git_worktree_keeper.controller.commands import (
    ChangeDirectory,
    CompleteFirstRun,
    CreateWorktree,
    DeleteWorktree,
    FetchCommitDetail,
    FetchPRStatus,
    InitializeRepository,
    LoadWorktrees,
    Quit,
    RenameBranch,
)
from git_worktree_keeper.controller.messages import (
    BranchRenamed,
    CommitDetailLoaded,
    FirstRunCompleted,
    KeyPressed,
    PRStatusFetched,
    RepositoryChecked,
    RepositoryInitialized,
    Resized,
    WorktreeCreated,
    WorktreeDeleted,
    WorktreesLoaded,
)
from git_worktree_keeper.controller.state import (
    AppState,
    CreateField,
    CreateModalView,
    DeleteConfirmView,
    DetailFocusedView,
    DetailOverlayView,
    FirstRunPromptView,
    ListView,
    Mode,
    NoRepositoryView,
    RenameModalView,
)
from git_worktree_keeper.formatters import default_branch_name
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.commit import CommitDetail
from git_worktree_keeper.ui.commit_lines import clamp_scroll, overlay_geometry, overlay_max_scroll

logger = get_logger(__name__)


class Transition(NamedTuple):
    """Result of one transition: the next state and an optional command."""
    state: AppState
    command: Optional[object] = None


def initial_state(branch_types: Sequence[str] = BRANCH_TYPES) -> AppState:
    """State before the startup repository check has answered."""
    return AppState(view=NoRepositoryView(), branch_types=tuple(branch_types))


def transition(state: AppState, event) -> Transition:
    """
    Apply one event to the state.

    Args:
        state: Current state
        event: KeyPressed, Resized or a command completion message

    Returns:
        Transition with the next state and the command to run, if any
    """
    if isinstance(event, Resized):
        return _on_resize(state, event)
    if isinstance(event, KeyPressed):
        return _on_key(state, event)

    handler = _MESSAGE_HANDLERS.get(type(event))
    if handler is None:
        logger.debug(f"Ignoring unknown event {event!r}")
        return Transition(state)
    return handler(state, event)


# Helpers


def _matches(event: KeyPressed, *names: str) -> bool:
    return event.key in names or (event.character is not None and event.character in names)


def _typed(event: KeyPressed) -> Optional[str]:
    """Printable character carried by a key press, if any."""
    character = event.character
    if character and len(character) == 1 and character.isprintable():
        return character
    return None


def _quit(state: AppState) -> Transition:
    return Transition(replace(state, quitting=True), Quit())


def _to_list(state: AppState) -> AppState:
    return state.with_view(ListView())


def _pr_lookup(state: AppState) -> Optional[FetchPRStatus]:
    """Fetch the PR of the selected worktree when it is not cached yet."""
    selected = state.selected
    if selected is None or selected.is_main or not selected.branch:
        return None
    if not state.summary.pr_lookup_available or selected.branch in state.pr_cache:
        return None
    return FetchPRStatus(branch=selected.branch)


def _move_cursor(state: AppState, cursor: int) -> Transition:
    cursor = min(max(0, cursor), len(state.worktrees))
    moved = replace(state, cursor=cursor)
    return Transition(moved, _pr_lookup(moved))


def _clamp_overlay(state: AppState, view: DetailOverlayView, scroll: int) -> AppState:
    scroll = clamp_scroll(view.detail, scroll, state.width, state.height)
    return state.with_view(replace(view, scroll=scroll))


# Input events


def _on_resize(state: AppState, event: Resized) -> Transition:
    resized = replace(state, width=max(0, event.width), height=max(0, event.height))
    if isinstance(resized.view, DetailOverlayView):
        resized = _clamp_overlay(resized, resized.view, resized.view.scroll)
    return Transition(resized)


def _on_key(state: AppState, event: KeyPressed) -> Transition:
    # An error banner swallows exactly one key
    if state.error:
        return Transition(state.with_error(None))
    if event.key == "ctrl+c":
        return _quit(state)
    return _KEY_HANDLERS[state.mode](state, event)


def _no_repository_key(state: AppState, event: KeyPressed) -> Transition:
    if _matches(event, "i"):
        return Transition(state, InitializeRepository())
    if _matches(event, "q"):
        return _quit(state)
    return Transition(state)


def _first_run_key(state: AppState, event: KeyPressed) -> Transition:
    if _matches(event, "y"):
        return Transition(_to_list(state), CompleteFirstRun(install_shell=True))
    if _matches(event, "n", "escape", "q"):
        return Transition(_to_list(state), CompleteFirstRun(install_shell=False))
    return Transition(state)


def _list_key(state: AppState, event: KeyPressed) -> Transition:
    selected = state.selected

    if _matches(event, "up", "k"):
        return _move_cursor(state, state.cursor - 1)
    if _matches(event, "down", "j"):
        return _move_cursor(state, state.cursor + 1)
    if _matches(event, "home", "g"):
        return _move_cursor(state, 0)
    if _matches(event, "end", "G"):
        return _move_cursor(state, len(state.worktrees))
    if _matches(event, "q"):
        return _quit(state)
    if _matches(event, "r"):
        return Transition(state, LoadWorktrees())
    if _matches(event, "n"):
        return Transition(state.with_view(CreateModalView()))
    if event.key == "enter":
        if selected is None:
            return Transition(state.with_view(CreateModalView()))
        return Transition(state.with_view(DetailFocusedView()))

    if selected is None:
        return Transition(state)
    if _matches(event, "d"):
        if selected.is_main:
            return Transition(state)
        return Transition(state.with_view(DeleteConfirmView()))
    if _matches(event, "e"):
        # Detached and bare worktrees have no branch to rename
        if not selected.branch:
            return Transition(state)
        return Transition(state.with_view(RenameModalView(name=selected.branch)))
    if _matches(event, "c"):
        return Transition(replace(state, quitting=True), ChangeDirectory(path=selected.path))
    return Transition(state)


def _derive_branch(state: AppState, view: CreateModalView) -> CreateModalView:
    if view.branch_edited:
        return view
    branch_type = state.branch_types[view.type_index]
    return replace(view, branch=default_branch_name(branch_type, view.display_name))


def _create_key(state: AppState, event: KeyPressed) -> Transition:
    view = state.view

    if event.key == "escape" and not view.picker_open:
        return Transition(_to_list(state))
    if not state.summary.has_commits:
        # Only escape is honoured while creation is impossible
        return Transition(state)
    if view.picker_open:
        return _type_picker_key(state, view, event)

    field_count = len(CreateField)
    if event.key in ("tab", "down"):
        next_field = CreateField((view.active_field + 1) % field_count)
        return Transition(state.with_view(replace(view, active_field=next_field)))
    if event.key in ("shift+tab", "up"):
        previous_field = CreateField((view.active_field - 1) % field_count)
        return Transition(state.with_view(replace(view, active_field=previous_field)))

    if event.key == "enter":
        if view.active_field == CreateField.TYPE:
            opened = replace(view, picker_open=True, picker_index=view.type_index)
            return Transition(state.with_view(opened))
        if view.display_name and view.branch:
            return Transition(state, CreateWorktree(
                display_name=view.display_name,
                branch=view.branch,
                description=view.description,
            ))
        return Transition(state)

    if event.key == "backspace":
        return Transition(state.with_view(_erase_create_field(state, view)))

    character = _typed(event)
    if character is not None:
        return Transition(state.with_view(_type_into_create_field(state, view, character)))
    return Transition(state)


def _type_picker_key(state: AppState, view: CreateModalView, event: KeyPressed) -> Transition:
    last = len(state.branch_types) - 1
    if _matches(event, "up", "k"):
        return Transition(state.with_view(replace(view, picker_index=max(0, view.picker_index - 1))))
    if _matches(event, "down", "j"):
        return Transition(state.with_view(replace(view, picker_index=min(last, view.picker_index + 1))))
    if event.key in ("enter", "escape"):
        chosen = replace(view, picker_open=False, type_index=view.picker_index)
        return Transition(state.with_view(_derive_branch(state, chosen)))
    return Transition(state)


def _erase_create_field(state: AppState, view: CreateModalView) -> CreateModalView:
    if view.active_field == CreateField.NAME:
        return _derive_branch(state, replace(view, display_name=view.display_name[:-1]))
    if view.active_field == CreateField.BRANCH:
        return replace(view, branch=view.branch[:-1], branch_edited=True)
    if view.active_field == CreateField.DESCRIPTION:
        return replace(view, description=view.description[:-1])
    return view


def _type_into_create_field(state: AppState, view: CreateModalView, character: str) -> CreateModalView:
    if view.active_field == CreateField.NAME:
        return _derive_branch(state, replace(view, display_name=view.display_name + character))
    if view.active_field == CreateField.BRANCH:
        if character.isspace():
            character = "-"
        return replace(view, branch=view.branch + character, branch_edited=True)
    if view.active_field == CreateField.DESCRIPTION:
        return replace(view, description=view.description + character)
    # The type is chosen with the picker, not typed
    return view


def _rename_key(state: AppState, event: KeyPressed) -> Transition:
    view = state.view
    if event.key == "escape":
        return Transition(_to_list(state))
    if event.key == "enter":
        selected = state.selected
        if selected is None or not view.name or view.name == selected.branch:
            return Transition(_to_list(state))
        return Transition(state, RenameBranch(old_name=selected.branch, new_name=view.name))
    if event.key == "backspace":
        return Transition(state.with_view(replace(view, name=view.name[:-1])))

    character = _typed(event)
    if character is not None:
        return Transition(state.with_view(replace(view, name=view.name + character)))
    return Transition(state)


def _delete_key(state: AppState, event: KeyPressed) -> Transition:
    if _matches(event, "y"):
        selected = state.selected
        if selected is None or selected.is_main:
            return Transition(_to_list(state))
        return Transition(state, DeleteWorktree(branch=selected.branch, path=selected.path))
    if _matches(event, "n", "escape"):
        return Transition(_to_list(state))
    return Transition(state)


def _detail_focused_key(state: AppState, event: KeyPressed) -> Transition:
    view = state.view
    selected = state.selected
    commits = selected.commits if selected is not None else ()

    if _matches(event, "q"):
        return _quit(state)
    if event.key == "escape":
        return Transition(_to_list(state))
    if _matches(event, "up", "k"):
        index = max(0, view.commit_index - 1)
        return Transition(state.with_view(replace(view, commit_index=index)))
    if _matches(event, "down", "j"):
        index = max(0, min(len(commits) - 1, view.commit_index + 1))
        return Transition(state.with_view(replace(view, commit_index=index)))
    if event.key == "enter":
        commit = selected.commit_at(view.commit_index) if selected is not None else None
        if commit is None:
            return Transition(state)
        overlay = DetailOverlayView(
            commit_index=view.commit_index,
            detail=CommitDetail.placeholder(commit),
        )
        command = FetchCommitDetail(worktree_path=selected.path, commit_hash=commit.short_hash)
        return Transition(state.with_view(overlay), command)
    return Transition(state)


def _detail_overlay_key(state: AppState, event: KeyPressed) -> Transition:
    view = state.view
    page = overlay_geometry(state.width, state.height).visible_lines

    if event.key == "escape":
        return Transition(state.with_view(DetailFocusedView(commit_index=view.commit_index)))

    if _matches(event, "up", "k"):
        target = view.scroll - 1
    elif _matches(event, "down", "j"):
        target = view.scroll + 1
    elif event.key == "pageup":
        target = view.scroll - page
    elif event.key == "pagedown":
        target = view.scroll + page
    elif event.key == "home":
        target = 0
    elif event.key == "end":
        target = overlay_max_scroll(view.detail, state.width, state.height)
    else:
        return Transition(state)
    return Transition(_clamp_overlay(state, view, target))


_KEY_HANDLERS = {
    Mode.NO_REPOSITORY: _no_repository_key,
    Mode.FIRST_RUN_PROMPT: _first_run_key,
    Mode.LIST: _list_key,
    Mode.CREATE_MODAL: _create_key,
    Mode.RENAME_MODAL: _rename_key,
    Mode.DELETE_CONFIRM: _delete_key,
    Mode.DETAIL_FOCUSED: _detail_focused_key,
    Mode.DETAIL_OVERLAY: _detail_overlay_key,
}


# Completion messages


def _repository_checked(state: AppState, message: RepositoryChecked) -> Transition:
    if not message.is_repository:
        return Transition(state.with_view(NoRepositoryView(checked=True)))
    if not message.first_run_done:
        return Transition(state.with_view(FirstRunPromptView()))
    return Transition(_to_list(state), LoadWorktrees())


def _worktrees_loaded(state: AppState, message: WorktreesLoaded) -> Transition:
    if message.error:
        return Transition(state.with_error(message.error))

    loaded = replace(
        state,
        worktrees=tuple(message.worktrees),
        summary=message.summary if message.summary is not None else state.summary,
        cursor=min(max(0, state.cursor), len(message.worktrees)),
    )

    # Views that target the selected worktree cannot outlive it
    view = loaded.view
    selected = loaded.selected
    if isinstance(view, (RenameModalView, DeleteConfirmView, DetailFocusedView, DetailOverlayView)) and selected is None:
        loaded = _to_list(loaded)
    elif isinstance(view, DetailFocusedView):
        last = max(0, len(selected.commits) - 1)
        loaded = loaded.with_view(replace(view, commit_index=min(view.commit_index, last)))

    return Transition(loaded, _pr_lookup(loaded))


def _commit_detail_loaded(state: AppState, message: CommitDetailLoaded) -> Transition:
    view = state.view
    if not isinstance(view, DetailOverlayView) or view.detail.short_hash != message.commit_hash:
        logger.debug(f"Dropping late commit detail for {message.commit_hash}")
        return Transition(state)
    if message.error:
        return Transition(state.with_error(message.error))
    if message.detail is None:
        return Transition(state)
    updated = replace(view, detail=message.detail)
    return Transition(_clamp_overlay(state, updated, updated.scroll))


def _pr_status_fetched(state: AppState, message: PRStatusFetched) -> Transition:
    cache = dict(state.pr_cache)
    cache[message.branch] = message.badge
    return Transition(replace(state, pr_cache=cache))


def _repository_initialized(state: AppState, message: RepositoryInitialized) -> Transition:
    if message.error:
        return Transition(state.with_error(message.error))
    return Transition(_to_list(state), LoadWorktrees())


def _first_run_completed(state: AppState, message: FirstRunCompleted) -> Transition:
    return Transition(state.with_error(message.error), LoadWorktrees())


def _mutation_completed(state: AppState, message) -> Transition:
    finished = _to_list(state)
    if message.error:
        finished = finished.with_error(message.error)
    return Transition(finished, LoadWorktrees())


def _worktree_deleted(state: AppState, message: WorktreeDeleted) -> Transition:
    result = _mutation_completed(state, message)
    # Only the last row leaves the cursor past the shortened list
    if not message.error and result.state.cursor >= len(state.worktrees) > 0:
        result = result._replace(state=replace(result.state, cursor=result.state.cursor - 1))
    return result


_MESSAGE_HANDLERS = {
    RepositoryChecked: _repository_checked,
    WorktreesLoaded: _worktrees_loaded,
    CommitDetailLoaded: _commit_detail_loaded,
    PRStatusFetched: _pr_status_fetched,
    RepositoryInitialized: _repository_initialized,
    FirstRunCompleted: _first_run_completed,
    WorktreeCreated: _mutation_completed,
    WorktreeDeleted: _worktree_deleted,
    BranchRenamed: _mutation_completed,
}
