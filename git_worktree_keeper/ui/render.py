"""Frame renderer.

render_frame turns an AppState into one rich Text of exactly
state.height lines, each exactly state.width cells wide. It reads nothing
but the state and the palette, so the same state always draws the same
frame.
"""

from typing import List, Optional, Sequence

from rich.text import Text

from git_worktree_keeper.constants import (
    APP_NAME,
    LEFT_PANE_MIN_WIDTH,
    NEW_WORKTREE_LABEL,
    NO_COMMITS_HINT,
    PANE_GUTTER,
    SEPARATOR,
    SHELL_FUNCTION_NAME,
    SYMBOL_BULLET,
    SYMBOL_CURSOR,
    SYMBOL_INDICATOR,
    SYMBOL_RULE,
    SYMBOL_SELECTED,
    SYMBOL_STASH,
)
from git_worktree_keeper.controller.state import (
    AppState,
    CreateField,
    CreateModalView,
    DetailFocusedView,
    DetailOverlayView,
    Mode,
    RenameModalView,
)
from git_worktree_keeper.formatters import (
    format_pr_badge,
    format_sync_status,
    format_worktree_status,
    pad_right,
    truncate,
    wrap_words,
)
from git_worktree_keeper.models.worktree import WorktreeEntry
from git_worktree_keeper.ui.boxes import (
    blank,
    box,
    center,
    center_lines,
    fit,
    join_horizontal,
    spread,
    stack,
)
from git_worktree_keeper.ui.commit_lines import (
    build_commit_lines,
    max_scroll,
    overlay_geometry,
)
from git_worktree_keeper.ui.theme import DEFAULT_PALETTE, Palette

# Modals keep at least this inner width so typing does not resize them
MODAL_MIN_INNER_WIDTH = 40
HINT_GAP = "    "

_MODAL_MODES = {
    Mode.CREATE_MODAL,
    Mode.RENAME_MODAL,
    Mode.DELETE_CONFIRM,
    Mode.DETAIL_OVERLAY,
}


def render_frame(state: AppState, palette: Palette = DEFAULT_PALETTE) -> Text:
    """
    Draw the whole screen for a state.

    Args:
        state: Application state, including the viewport size
        palette: Styles to draw with

    Returns:
        A Text of exactly state.height lines of state.width cells, or an
        empty Text when the viewport has no area yet
    """
    width, height = state.width, state.height
    if width <= 0 or height <= 0:
        return Text("")

    mode = state.mode
    if mode in (Mode.NO_REPOSITORY, Mode.FIRST_RUN_PROMPT):
        header = render_header(state, palette)
        body = _no_repository_body(state, palette) if mode == Mode.NO_REPOSITORY else _first_run_modal(palette)
        lines = stack([header, center(body, width, height - len(header))], width, height)
    elif mode in _MODAL_MODES:
        lines = center(_modal(state, palette), width, height)
    else:
        lines = stack([_main_view(state, palette)], width, height)

    # The banner is the footer in the main view; elsewhere it takes the last line
    if state.error and mode not in (Mode.LIST, Mode.DETAIL_FOCUSED):
        lines[-1] = fit(render_footer(state, palette), width)

    return Text("\n").join(lines)


# Header


def render_header(state: AppState, palette: Palette) -> List[Text]:
    """
    Render the boxed header.

    Line 1 carries the app name and as many summary sections as fit; the
    first section that does not fit moves to line 2 together with every
    section after it. Line 2 also shows the fetch age on the right.
    """
    inner_width = max(4, state.width - 4)
    summary = state.summary
    separator = Text(SEPARATOR, style=palette.dim)
    app_name = Text(APP_NAME, style=palette.title)

    candidates = []
    if summary.remote_url:
        candidates.append(Text(summary.remote_url, style=palette.dim))
    if state.worktrees:
        candidates.append(Text(f"{len(state.worktrees)} worktrees", style=palette.dim))
    if summary.stash_count > 0:
        candidates.append(Text(f"{SYMBOL_STASH} {summary.stash_count} stashed", style=palette.warning))

    used = app_name.cell_len
    fitted: List[Text] = []
    overflow: List[Text] = []
    for candidate in candidates:
        needed = separator.cell_len + candidate.cell_len
        if not overflow and used + needed <= inner_width:
            fitted.append(candidate)
            used += needed
        else:
            overflow.append(candidate)

    lines = [spread(app_name, separator.join(fitted), inner_width)]

    fetched = Text(f"fetched {summary.fetched_ago}", style=palette.dim) if summary.fetched_ago else None
    if overflow or fetched is not None:
        left = separator.join(overflow)
        if fetched is None:
            lines.append(left)
        else:
            lines.append(spread(left, fetched, inner_width, min_gap=1 if overflow else 0))

    return box(lines, state.width, border_style=palette.border_inactive, padding_x=1)


# Footer


def render_hints(palette: Palette, *hints: str) -> Text:
    """Render "key  action" hints with the key highlighted."""
    parts = []
    for hint in hints:
        key, gap, action = hint.partition("  ")
        if gap:
            parts.append(Text.assemble((key, palette.key), (gap + action, palette.dim)))
        else:
            parts.append(Text(hint, style=palette.dim))
    return Text(HINT_GAP, style=palette.dim).join(parts)


def render_footer(state: AppState, palette: Palette) -> Text:
    """The error banner when one is set, otherwise the key hints for the mode."""
    if state.error:
        return Text.assemble(
            (f"error: {state.error}", palette.danger),
            ("    (any key to dismiss)", palette.dim),
        )

    if state.mode == Mode.DETAIL_FOCUSED:
        return render_hints(palette, "↑↓  navigate commits", "enter  view", "esc  back", "q  quit")

    if state.mode == Mode.LIST:
        selected = state.selected
        if selected is None or selected.is_main:
            return render_hints(palette, "n  new", "↑↓  navigate", "r  refresh", "q  quit")
        return render_hints(
            palette,
            "n  new",
            "d  delete",
            "e  edit",
            "c  cd",
            "enter  focus",
            "↑↓  navigate",
            "q  quit",
        )

    return render_hints(palette, "q  quit")


# Main view


def _main_view(state: AppState, palette: Palette) -> List[Text]:
    header = render_header(state, palette)
    footer = [render_footer(state, palette)]

    pane_height = max(3, state.height - len(header) - len(footer) - 2)
    left_width = max(LEFT_PANE_MIN_WIDTH, state.width // 4)
    right_width = max(0, state.width - left_width - PANE_GUTTER)

    panes = join_horizontal(
        _left_pane(state, left_width, pane_height, palette),
        _right_pane(state, right_width, pane_height, palette),
        PANE_GUTTER,
    )
    return header + [Text("")] + panes + [Text("")] + footer


def _left_pane(state: AppState, outer_width: int, outer_height: int, palette: Palette) -> List[Text]:
    inner_width = outer_width - 2
    inner_height = outer_height - 2
    name_width = inner_width - 2

    rows = [_new_worktree_row(state, name_width, palette)]
    for index, worktree in enumerate(state.worktrees, start=1):
        rows.append(_list_row(truncate(worktree.name, name_width), name_width, state.cursor == index, palette))

    # Scroll the list so the cursor row stays inside the pane
    first = max(0, state.cursor - inner_height + 1)
    rows = rows[first:]

    border = palette.border_inactive if state.mode == Mode.DETAIL_FOCUSED else palette.border_active
    return box(rows, outer_width, outer_height, border_style=border)


def _new_worktree_row(state: AppState, name_width: int, palette: Palette) -> Text:
    text = truncate(NEW_WORKTREE_LABEL, name_width)
    if not state.summary.has_commits:
        label = pad_right(text, name_width - len(NO_COMMITS_HINT) - 4) + "  " + NO_COMMITS_HINT
        return Text.assemble("  ", (label, palette.dim))
    if state.cursor == 0:
        return Text.assemble(
            (SYMBOL_SELECTED, palette.accent),
            " ",
            (pad_right(text, name_width), f"bold {palette.accent}".strip()),
        )
    return Text.assemble("  ", (pad_right(text, name_width), palette.dim))


def _list_row(name: str, name_width: int, selected: bool, palette: Palette) -> Text:
    if selected:
        return Text.assemble(
            (SYMBOL_SELECTED, palette.accent),
            " ",
            (pad_right(name, name_width), palette.selected),
        )
    return Text.assemble("  ", pad_right(name, name_width))


def _right_pane(state: AppState, outer_width: int, outer_height: int, palette: Palette) -> List[Text]:
    inner_width = outer_width - 2
    selected = state.selected

    if selected is not None:
        lines = _detail_lines(state, selected, inner_width, palette)
    elif not state.summary.has_commits:
        lines = [
            Text("Worktrees require at least one commit.", style=palette.dim),
            Text(""),
            Text("Run  git commit  on the main branch first,", style=palette.dim),
            Text("then worktrees can be created here.", style=palette.dim),
        ]
    else:
        lines = [
            Text(f'Select "{NEW_WORKTREE_LABEL}" and press enter to create', style=palette.dim),
            Text("or press  n  from anywhere.", style=palette.dim),
        ]

    border = palette.border_focused if state.mode == Mode.DETAIL_FOCUSED else palette.border_inactive
    return box(lines, outer_width, outer_height, border_style=border)


def _section_rule(title: str, rule_width: int, palette: Palette) -> Text:
    return Text(f"{title} {SYMBOL_RULE * max(3, rule_width)}", style=palette.dim)


def _detail_lines(state: AppState, worktree: WorktreeEntry, inner_width: int, palette: Palette) -> List[Text]:
    """Title, metadata rows, description and recent commits of one worktree."""
    title = Text(worktree.name, style=palette.title)
    badge = _pr_badge(state, worktree, palette)
    lines = [spread(title, badge, inner_width, min_gap=1) if badge is not None else title, Text("")]

    def row(label: str, value: Text) -> None:
        lines.append(Text.assemble(
            (SYMBOL_INDICATOR, palette.ok),
            "  ",
            (f"{label:<8}", palette.label),
            "  ",
            value,
        ))

    row("Branch", Text(worktree.branch))
    row("Path", Text(truncate(worktree.path, inner_width - 22)))
    row("Updated", Text(worktree.updated_at))
    if worktree.head_sha:
        row("HEAD", Text(worktree.head_sha, style=palette.head_sha))
    row("Status", Text.assemble(*(
        (text, palette.tone(tone)) for text, tone in format_worktree_status(worktree)
    )))
    if not worktree.is_main:
        sync_text, sync_tone = format_sync_status(worktree, state.summary.default_branch)
        row("Sync", Text(sync_text, style=palette.tone(sync_tone)))
        if worktree.created_from:
            row("Created", Text(f"from {worktree.created_from}"))

    if worktree.description:
        lines.append(Text(""))
        lines.append(_section_rule("Description", inner_width - 14, palette))
        lines.append(Text(""))
        lines.extend(Text(line, style=palette.dim) for line in wrap_words(worktree.description, inner_width))

    if worktree.commits:
        focused = isinstance(state.view, DetailFocusedView)
        heading = _section_rule("Commits", inner_width - 10, palette)
        if focused:
            heading.append_text(Text.assemble("  ", ("enter to view", palette.dim)))
        lines.append(Text(""))
        lines.append(heading)
        lines.append(Text(""))

        message_width = max(10, inner_width - 28)
        for index, commit in enumerate(worktree.commits):
            subject = truncate(commit.subject, message_width)
            if focused and index == state.view.commit_index:
                lines.append(Text.assemble(
                    (SYMBOL_SELECTED, palette.accent),
                    " ",
                    (commit.short_hash, palette.head_sha),
                    "  ",
                    (subject, palette.selected),
                    "  ",
                    (commit.relative_time, palette.dim),
                ))
            else:
                lines.append(Text.assemble(
                    (SYMBOL_BULLET, palette.dim),
                    " ",
                    (commit.short_hash, palette.info),
                    "  ",
                    subject,
                    "  ",
                    (commit.relative_time, palette.dim),
                ))

    return lines


def _pr_badge(state: AppState, worktree: WorktreeEntry, palette: Palette) -> Optional[Text]:
    """Badge for the title line; None while unknown or when lookup is off."""
    if worktree.is_main or not state.summary.pr_lookup_available:
        return None
    if worktree.branch not in state.pr_cache:
        return None
    text, tone = format_pr_badge(state.pr_cache[worktree.branch])
    return Text(text, style=palette.tone(tone))


# Full-screen prompts


def _no_repository_body(state: AppState, palette: Palette) -> List[Text]:
    if not state.view.checked:
        return [Text("Looking for a git repository…", style=palette.dim)]
    return center_lines([
        Text("No git repository found.", style=palette.dim),
        Text(""),
        Text("Would you like to initialise one?", style=palette.dim),
        Text(""),
        render_hints(palette, "i  init", "q  quit"),
    ])


def _first_run_modal(palette: Palette) -> List[Text]:
    return _modal_box([
        Text("⚡ Add shell integration for cd-on-exit?", style=f"bold {palette.accent}".strip()),
        Text(""),
        Text(f"This adds a {SHELL_FUNCTION_NAME}() function to your shell rc file.", style=palette.dim),
        Text(f"Invoke {SHELL_FUNCTION_NAME} instead of git-worktree-keeper to use it.", style=palette.dim),
        Text(""),
        render_hints(palette, "y  add it", "n  skip"),
    ], palette, min_inner_width=0)


# Modals


def _modal(state: AppState, palette: Palette) -> List[Text]:
    view = state.view
    if isinstance(view, CreateModalView):
        if not state.summary.has_commits:
            return _no_commits_modal(palette)
        if view.picker_open:
            return _type_picker_modal(state, view, palette)
        return _create_modal(state, view, palette)
    if isinstance(view, RenameModalView):
        return _rename_modal(view, palette)
    if isinstance(view, DetailOverlayView):
        return _commit_overlay(state, view, palette)
    return _delete_modal(state, palette)


def _modal_box(lines: Sequence[Text], palette: Palette, min_inner_width: int = MODAL_MIN_INNER_WIDTH) -> List[Text]:
    inner_width = max([min_inner_width] + [line.cell_len for line in lines])
    return box(lines, inner_width + 6, border_style=palette.border_active, padding_x=2, padding_y=1)


def _field_input(value: str, active: bool, palette: Palette) -> Text:
    if active:
        return Text.assemble(value, (SYMBOL_CURSOR, palette.accent))
    return Text(value + " ", style=palette.dim)


def _create_modal(state: AppState, view: CreateModalView, palette: Palette) -> List[Text]:
    def label(text: str, field: CreateField) -> Text:
        if view.active_field == field:
            return Text(text, style=f"bold {palette.accent}".strip())
        return Text(text, style=palette.label)

    type_name = state.branch_types[view.type_index]
    if view.active_field == CreateField.TYPE:
        type_display = Text.assemble((type_name, palette.selected), "  ", ("↵ change", palette.dim))
        hints = render_hints(palette, "enter  change type", "tab/↑↓  navigate", "esc  cancel")
    else:
        type_display = Text(type_name, style=palette.dim)
        hints = render_hints(palette, "enter  create", "tab/↑↓  navigate", "esc  cancel")

    return _modal_box([
        Text("New Worktree", style=palette.title),
        Text(""),
        label("Type", CreateField.TYPE),
        type_display,
        Text(""),
        label("Name", CreateField.NAME),
        _field_input(view.display_name, view.active_field == CreateField.NAME, palette),
        Text(""),
        label("Branch", CreateField.BRANCH),
        _field_input(view.branch, view.active_field == CreateField.BRANCH, palette),
        Text(""),
        label("Description", CreateField.DESCRIPTION),
        _field_input(view.description, view.active_field == CreateField.DESCRIPTION, palette),
        Text(""),
        hints,
    ], palette)


def _type_picker_modal(state: AppState, view: CreateModalView, palette: Palette) -> List[Text]:
    rows = []
    for index, branch_type in enumerate(state.branch_types):
        if index == view.picker_index:
            rows.append(Text.assemble((SYMBOL_SELECTED, palette.accent), " ", (branch_type, palette.selected)))
        else:
            rows.append(Text.assemble("  ", (branch_type, palette.dim)))
    return _modal_box(
        [Text("Select Type", style=palette.title), Text("")]
        + rows
        + [Text(""), render_hints(palette, "↑↓  navigate", "enter  select", "esc  close")],
        palette,
        min_inner_width=0,
    )


def _no_commits_modal(palette: Palette) -> List[Text]:
    return _modal_box([
        Text("New Worktree", style=palette.title),
        Text(""),
        Text("✗  Cannot create worktree", style=palette.danger),
        Text(""),
        Text("No commits on main yet.", style=palette.dim),
        Text("Make an initial commit first.", style=palette.dim),
        Text(""),
        render_hints(palette, "esc  close"),
    ], palette, min_inner_width=0)


def _rename_modal(view: RenameModalView, palette: Palette) -> List[Text]:
    return _modal_box([
        Text("Rename Branch", style=palette.title),
        Text(""),
        Text("Branch name", style=palette.label),
        _field_input(view.name, True, palette),
        Text(""),
        render_hints(palette, "enter  save", "esc  cancel"),
    ], palette)


def _delete_modal(state: AppState, palette: Palette) -> List[Text]:
    name = state.selected.name if state.selected is not None else ""
    return _modal_box([
        Text(f"Delete {name}?", style=palette.danger),
        Text(""),
        Text("This cannot be undone.", style=palette.dim),
        Text(""),
        render_hints(palette, "y  confirm", "n / esc  cancel"),
    ], palette, min_inner_width=0)


def _commit_overlay(state: AppState, view: DetailOverlayView, palette: Palette) -> List[Text]:
    """Fixed-size overlay showing a scroll window into the commit lines."""
    geometry = overlay_geometry(state.width, state.height)
    content = build_commit_lines(view.detail, geometry.inner_width, palette)
    total = len(content)

    scroll = min(max(0, view.scroll), max_scroll(total, geometry.visible_lines))
    window = content[scroll:scroll + geometry.visible_lines]
    window.extend(blank(geometry.inner_width) for _ in range(geometry.visible_lines - len(window)))

    hints = render_hints(palette, "↑↓  scroll", "esc  close")
    if total > geometry.visible_lines:
        hints.append_text(Text.assemble("  ", (f"{scroll + 1}/{total}", palette.dim)))

    return box(
        window + [Text(""), hints],
        geometry.outer_width,
        geometry.outer_height,
        border_style=palette.border_active,
        padding_x=2,
        padding_y=1,
    )
