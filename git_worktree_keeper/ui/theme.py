"""Color palette for the TUI.

The palette is a plain immutable value handed to the renderer, so tests can
render with any palette (or with NO_COLOR_PALETTE) without touching globals.
"""

from dataclasses import dataclass

from git_worktree_keeper.constants import Tone


@dataclass(frozen=True)
class Palette:
    """Rich style strings for every element the renderer draws."""

    # General UI colors, ANSI 16-color so they follow the terminal theme
    accent: str = "magenta"
    dim: str = "bright_black"
    ok: str = "green"
    warning: str = "yellow"
    danger: str = "red"
    info: str = "blue"

    # Fixed hues for indicators that carry meaning
    head_sha: str = "#f2cdcd"
    pr_open: str = "#94e2d5"
    pr_merged: str = "#cba6f7"
    pr_closed: str = "#f38ba8"
    pr_none: str = "#a6adc8"

    # Commit overlay
    commit_title: str = "bold #cdd6f4"
    commit_body: str = "#bac2de"
    commit_context: str = "#a6adc8"
    diff_added: str = "#a6e3a1"
    diff_removed: str = "#f38ba8"
    diff_file_header: str = "bold"
    file_added: str = "#a6e3a1"
    file_modified: str = "#f9e2af"
    file_deleted: str = "#f38ba8"
    file_renamed: str = "#cba6f7"

    # Borders
    border_active: str = "magenta"
    border_inactive: str = "bright_black"
    border_focused: str = "#cba6f7"

    # Text roles
    title: str = "bold"
    selected: str = "bold"
    label: str = "bright_black"
    key: str = "bold magenta"
    default: str = ""

    def tone(self, tone: str) -> str:
        """Resolve a semantic Tone to a style string."""
        return {
            Tone.DEFAULT: self.default,
            Tone.DIM: self.dim,
            Tone.OK: self.ok,
            Tone.WARNING: self.warning,
            Tone.DANGER: self.danger,
            Tone.PR_OPEN: self.pr_open,
            Tone.PR_MERGED: self.pr_merged,
            Tone.PR_CLOSED: self.pr_closed,
            Tone.PR_NONE: self.pr_none,
        }.get(tone, self.default)

    def file_status(self, status: str) -> str:
        """Style for a single-letter file status code."""
        return {
            "A": self.file_added,
            "D": self.file_deleted,
            "R": self.file_renamed,
        }.get(status, self.file_modified)


DEFAULT_PALETTE = Palette()

# Every role rendered as plain text
NO_COLOR_PALETTE = Palette(**{name: "" for name in Palette.__dataclass_fields__})
