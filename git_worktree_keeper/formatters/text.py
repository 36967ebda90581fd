"""Fixed-width text layout helpers.

Widths are terminal cells as measured by rich, so wide glyphs count as two
columns and multi-byte characters are never split.
"""

from typing import List

from rich.cells import cell_len

from git_worktree_keeper.constants import SYMBOL_ELLIPSIS


def truncate(text: str, max_width: int) -> str:
    """
    Shorten text to fit max_width cells, ending with an ellipsis when cut.

    Args:
        text: Text to shorten
        max_width: Available cells

    Returns:
        The text itself if it fits, otherwise the longest prefix that fits
        together with a trailing ellipsis (a bare prefix when max_width is 1)
    """
    if max_width <= 0:
        return ""
    if cell_len(text) <= max_width:
        return text
    if max_width <= 1:
        return _fit_prefix(text, max_width)
    return _fit_prefix(text, max_width - cell_len(SYMBOL_ELLIPSIS)) + SYMBOL_ELLIPSIS


def _fit_prefix(text: str, max_width: int) -> str:
    used = 0
    for index, char in enumerate(text):
        width = cell_len(char)
        if used + width > max_width:
            return text[:index]
        used += width
    return text


def pad_right(text: str, width: int) -> str:
    """Append spaces until text is at least width cells wide."""
    missing = width - cell_len(text)
    if missing <= 0:
        return text
    return text + " " * missing


def wrap_words(text: str, width: int) -> List[str]:
    """
    Greedily wrap text on word boundaries.

    Newlines are hard breaks. A word longer than width is put on its own
    line without being shortened.

    Args:
        text: Text to wrap
        width: Maximum line width in cells

    Returns:
        List of lines, without trailing whitespace
    """
    if width <= 0:
        return [text]

    lines: List[str] = []
    for paragraph in text.split("\n"):
        line = ""
        for word in paragraph.split():
            if not line:
                line = word
            elif cell_len(line) + 1 + cell_len(word) <= width:
                line += " " + word
            else:
                lines.append(line)
                line = word
        if line:
            lines.append(line)
    return lines
