"""Tests for the formatting helpers"""
import pytest
from rich.cells import cell_len

from git_worktree_keeper.constants import Tone
from git_worktree_keeper.formatters import (
    default_branch_name,
    format_pr_badge,
    format_relative_duration,
    format_sync_status,
    format_worktree_status,
    pad_right,
    slugify,
    truncate,
    worktree_dir_name,
    wrap_words,
)
from git_worktree_keeper.models.pull_request import PRBadge, PRState
from git_worktree_keeper.models.worktree import WorktreeEntry


class TestTruncate:
    """Test width-aware truncation."""

    @pytest.mark.parametrize("width", [0, 1, 2, 5, 11, 12, 40])
    def test_result_fits(self, width):
        """Test the result never exceeds the width."""
        assert cell_len(truncate("hello world!", width)) <= width

    def test_fitting_text_is_unchanged(self):
        """Test text that fits is returned as is."""
        assert truncate("hello", 5) == "hello"
        assert truncate("hello", 10) == "hello"

    def test_cut_text_ends_with_ellipsis(self):
        """Test cut text ends with an ellipsis."""
        assert truncate("hello world", 6) == "hello…"

    def test_width_one_has_no_ellipsis(self):
        """Test a single cell gets a bare prefix."""
        assert truncate("hello", 1) == "h"

    def test_negative_width(self):
        """Test a negative width gives an empty string."""
        assert truncate("hello", -3) == ""

    def test_wide_characters_are_not_split(self):
        """Test double-width glyphs count as two cells."""
        result = truncate("日本語テキスト", 5)
        assert cell_len(result) <= 5
        assert result == "日本…"


class TestPadRight:
    """Test right padding."""

    def test_pads_to_width(self):
        """Test short text is padded with spaces."""
        assert pad_right("ab", 5) == "ab   "

    def test_long_text_untouched(self):
        """Test text wider than the width is not cut."""
        assert pad_right("abcdef", 3) == "abcdef"


class TestWrapWords:
    """Test greedy word wrapping."""

    def test_lines_fit(self):
        """Test every line fits unless a single word is wider."""
        text = "the quick brown fox jumps over the lazy dog"
        lines = wrap_words(text, 10)
        assert all(cell_len(line) <= 10 for line in lines)
        assert " ".join(lines).split() == text.split()

    def test_long_word_on_own_line(self):
        """Test a word wider than the width is kept whole."""
        assert wrap_words("a supercalifragilistic b", 5) == ["a", "supercalifragilistic", "b"]

    def test_newlines_are_hard_breaks(self):
        """Test paragraphs stay separate."""
        assert wrap_words("one two\nthree", 40) == ["one two", "three"]

    def test_non_positive_width(self):
        """Test a zero width returns the text unwrapped."""
        assert wrap_words("a b", 0) == ["a b"]


class TestBranchNames:
    """Test slugs and derived branch names."""

    @pytest.mark.parametrize("text,expected", [
        ("Feat: Auth Refresh", "feat-auth-refresh"),
        ("a/b  c", "a/b-c"),
        ("  leading and trailing  ", "leading-and-trailing"),
        ("snake_case--and  spaces", "snake-case-and-spaces"),
        ("Ünïcode!", "ncode"),
        ("trailing/", "trailing"),
        ("", ""),
    ])
    def test_slugify(self, text, expected):
        """Test separators collapse and are stripped at the ends."""
        assert slugify(text) == expected

    def test_default_branch_name(self):
        """Test type and slug are joined with a slash."""
        assert default_branch_name("feat", "Auth Refresh") == "feat/auth-refresh"

    def test_default_branch_name_without_slug(self):
        """Test an empty name leaves just the type."""
        assert default_branch_name("fix", "!!") == "fix"

    def test_worktree_dir_name(self):
        """Test slashes become hyphens in directory names."""
        assert worktree_dir_name("feat/auth/refresh") == "feat-auth-refresh"


class TestStatusFormatting:
    """Test worktree, sync and PR badge formatting."""

    def test_clean_worktree(self):
        """Test a clean worktree shows a check mark."""
        entry = WorktreeEntry(name="x", path="/x", branch="x")
        assert format_worktree_status(entry) == [("✓ clean", Tone.OK)]

    def test_dirty_worktree(self):
        """Test changed and untracked counts are listed."""
        entry = WorktreeEntry(name="x", path="/x", branch="x", changed_count=2, untracked_count=1)
        text = "".join(part for part, _ in format_worktree_status(entry))
        assert text == "● 2 changed  1 untracked"

    @pytest.mark.parametrize("ahead,behind,merged,expected", [
        (2, 0, False, "↑2 ahead of main"),
        (0, 3, False, "↓3 behind main"),
        (1, 1, False, "↑1 ↓1 diverged from main"),
        (0, 0, True, "✓ merged into main"),
        (0, 0, False, "✓ up to date with main"),
    ])
    def test_sync_status(self, ahead, behind, merged, expected):
        """Test sync text for every ahead/behind combination."""
        entry = WorktreeEntry(name="x", path="/x", branch="x", ahead=ahead, behind=behind, is_merged=merged)
        text, _ = format_sync_status(entry, "main")
        assert text == expected

    def test_pr_badges(self):
        """Test badge text for each PR state."""
        assert format_pr_badge(None) == ("no PR", Tone.PR_NONE)
        assert format_pr_badge(PRBadge(PRState.OPEN, 7))[0] == "● open  #7"
        assert format_pr_badge(PRBadge(PRState.MERGED, 8))[0] == "✓ merged  #8"
        assert format_pr_badge(PRBadge(PRState.CLOSED, 9))[0] == "✗ closed  #9"


class TestRelativeDuration:
    """Test fetch age formatting."""

    @pytest.mark.parametrize("seconds,expected", [
        (-5, "just now"),
        (59, "just now"),
        (60, "1m ago"),
        (3599, "59m ago"),
        (7200, "2h ago"),
        (3 * 86400 + 10, "3d ago"),
    ])
    def test_format(self, seconds, expected):
        """Test each unit boundary."""
        assert format_relative_duration(seconds) == expected
