"""Commit detail overlay content and scroll math.

The overlay shows a flat list of lines. The renderer slices a window out of
it and the state machine clamps the scroll offset against it, so both must
build the exact same list for the same detail and viewport.
"""

from typing import List, NamedTuple

from rich.text import Text

from git_worktree_keeper.constants import (
    OVERLAY_HEIGHT_PERCENT,
    OVERLAY_MIN_HEIGHT,
    OVERLAY_MIN_WIDTH,
    OVERLAY_WIDTH_PERCENT,
    SYMBOL_BULLET,
    SYMBOL_RULE,
)
from git_worktree_keeper.formatters import truncate, wrap_words
from git_worktree_keeper.models.commit import CommitDetail, DiffLineKind
from git_worktree_keeper.ui.boxes import spread
from git_worktree_keeper.ui.theme import DEFAULT_PALETTE, Palette

# Border (1) plus horizontal padding (2) on each side
OVERLAY_CHROME_WIDTH = 6
# Border (1) plus vertical padding (1) top and bottom
OVERLAY_CHROME_HEIGHT = 4
# Blank line and key hints under the scroll window
OVERLAY_FOOTER_LINES = 2


class OverlayGeometry(NamedTuple):
    outer_width: int
    outer_height: int
    inner_width: int
    visible_lines: int


def overlay_geometry(width: int, height: int) -> OverlayGeometry:
    """Size of the commit overlay for a viewport of width x height."""
    outer_width = max(OVERLAY_MIN_WIDTH, width * OVERLAY_WIDTH_PERCENT // 100)
    outer_height = max(OVERLAY_MIN_HEIGHT, height * OVERLAY_HEIGHT_PERCENT // 100)
    inner_width = outer_width - OVERLAY_CHROME_WIDTH
    inner_height = outer_height - OVERLAY_CHROME_HEIGHT
    visible_lines = max(1, inner_height - OVERLAY_FOOTER_LINES)
    return OverlayGeometry(outer_width, outer_height, inner_width, visible_lines)


def _section_rule(title: str, inner_width: int, palette: Palette) -> Text:
    heading = f"{title} "
    return Text(heading + SYMBOL_RULE * max(0, inner_width - len(heading)), style=palette.dim)


def _diff_style(kind: DiffLineKind, palette: Palette) -> str:
    return {
        DiffLineKind.ADDED: palette.diff_added,
        DiffLineKind.REMOVED: palette.diff_removed,
        DiffLineKind.HUNK_HEADER: palette.accent,
        DiffLineKind.FILE_HEADER: palette.diff_file_header,
        DiffLineKind.METADATA: palette.dim,
    }.get(kind, palette.commit_context)


def build_commit_lines(
    detail: CommitDetail, inner_width: int, palette: Palette = DEFAULT_PALETTE
) -> List[Text]:
    """
    Build every line of the overlay body for one commit.

    Args:
        detail: Commit snapshot (placeholder or loaded)
        inner_width: Usable width inside the overlay box
        palette: Styles to apply

    Returns:
        Header, subject, optional body, then either a loading notice or the
        files-changed and diff sections
    """
    lines = [
        spread(
            Text(detail.short_hash, style=palette.head_sha),
            Text(detail.relative_time, style=palette.commit_context),
            inner_width,
            min_gap=1,
        ),
        Text(""),
        Text(truncate(detail.subject, inner_width), style=palette.commit_title),
    ]

    if detail.body:
        lines.append(Text(""))
        lines.extend(Text(line, style=palette.commit_body) for line in wrap_words(detail.body, inner_width))

    if not detail.loaded:
        lines.append(Text(""))
        lines.append(Text("Loading…", style=palette.dim))
        return lines

    if detail.files:
        lines.append(Text(""))
        lines.append(_section_rule(f"Files changed ({len(detail.files)})", inner_width, palette))
        lines.append(Text(""))
        for change in detail.files:
            lines.append(Text.assemble(
                (SYMBOL_BULLET, palette.dim),
                "  ",
                (change.status, palette.file_status(change.status)),
                "  ",
                (truncate(change.path, max(0, inner_width - 6)), palette.commit_title),
            ))

    if detail.diff:
        lines.append(Text(""))
        lines.append(_section_rule("Diff", inner_width, palette))
        lines.append(Text(""))
        for diff_line in detail.diff:
            lines.append(Text(truncate(diff_line.content, inner_width), style=_diff_style(diff_line.kind, palette)))

    return lines


def max_scroll(total_lines: int, visible_lines: int) -> int:
    """Largest valid scroll offset for a buffer of total_lines."""
    return max(0, total_lines - visible_lines)


def overlay_max_scroll(detail: CommitDetail, width: int, height: int) -> int:
    """Largest scroll offset of the overlay built for this viewport."""
    geometry = overlay_geometry(width, height)
    total = len(build_commit_lines(detail, geometry.inner_width))
    return max_scroll(total, geometry.visible_lines)


def clamp_scroll(detail: CommitDetail, scroll: int, width: int, height: int) -> int:
    """Clamp a scroll offset into [0, overlay_max_scroll]."""
    return min(max(0, scroll), overlay_max_scroll(detail, width, height))
