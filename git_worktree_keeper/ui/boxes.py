"""Line-based layout primitives.

A block is a list of rich Text lines. Every helper here returns lines of an
exact cell width, which is what keeps the frame from shifting when content
changes size.
"""

from typing import Iterable, List, Optional

from rich.text import Text

ROUNDED = {
    "top_left": "╭",
    "top_right": "╮",
    "bottom_left": "╰",
    "bottom_right": "╯",
    "horizontal": "─",
    "vertical": "│",
}


def fit(line: Text, width: int) -> Text:
    """Crop or pad a line to exactly width cells."""
    fitted = line.copy()
    fitted.truncate(max(0, width), overflow="crop", pad=True)
    return fitted


def blank(width: int) -> Text:
    return Text(" " * max(0, width))


def spread(left: Text, right: Text, width: int, min_gap: int = 0) -> Text:
    """Put left and right at the two ends of a line of the given width."""
    gap = max(min_gap, width - left.cell_len - right.cell_len)
    return Text.assemble(left, " " * gap, right)


def box(
    lines: Iterable[Text],
    width: int,
    height: Optional[int] = None,
    border_style: str = "",
    padding_x: int = 0,
    padding_y: int = 0,
) -> List[Text]:
    """
    Draw a rounded border around content.

    Args:
        lines: Content lines, cropped to the inner width
        width: Outer width including border
        height: Outer height including border; None sizes to the content
        border_style: Rich style for the border glyphs
        padding_x: Blank columns on each side inside the border
        padding_y: Blank rows above and below the content

    Returns:
        Lines of exactly width cells
    """
    inner_width = max(0, width - 2 - 2 * padding_x)
    content = [fit(line, inner_width) for line in lines]
    if height is not None:
        rows = max(0, height - 2 - 2 * padding_y)
        content = content[:rows]
        content.extend(blank(inner_width) for _ in range(rows - len(content)))

    horizontal = ROUNDED["horizontal"] * max(0, width - 2)
    vertical = Text(ROUNDED["vertical"], style=border_style)
    side_padding = " " * padding_x

    framed = [Text(ROUNDED["top_left"] + horizontal + ROUNDED["top_right"], style=border_style)]
    padded_rows = (
        [blank(inner_width)] * padding_y + content + [blank(inner_width)] * padding_y
    )
    for row in padded_rows:
        framed.append(Text.assemble(vertical, side_padding, row, side_padding, vertical))
    framed.append(Text(ROUNDED["bottom_left"] + horizontal + ROUNDED["bottom_right"], style=border_style))
    return [fit(line, width) for line in framed]


def join_horizontal(left: List[Text], right: List[Text], gutter: int) -> List[Text]:
    """Place two blocks side by side; the shorter one is padded with blanks."""
    left_width = max((line.cell_len for line in left), default=0)
    right_width = max((line.cell_len for line in right), default=0)
    rows = max(len(left), len(right))
    joined = []
    for index in range(rows):
        left_line = left[index] if index < len(left) else blank(left_width)
        right_line = right[index] if index < len(right) else blank(right_width)
        joined.append(Text.assemble(fit(left_line, left_width), " " * gutter, right_line))
    return joined


def center_lines(lines: List[Text]) -> List[Text]:
    """Center each line within the widest line of the block."""
    block_width = max((line.cell_len for line in lines), default=0)
    return [
        fit(Text.assemble(" " * ((block_width - line.cell_len) // 2), line), block_width)
        for line in lines
    ]


def center(block: List[Text], width: int, height: int) -> List[Text]:
    """Center a block on a blank canvas of width x height, cropping overflow."""
    block_width = max((line.cell_len for line in block), default=0)
    top = max(0, (height - len(block)) // 2)
    left = max(0, (width - block_width) // 2)

    canvas = [blank(width) for _ in range(top)]
    for line in block[: max(0, height - top)]:
        canvas.append(fit(Text.assemble(" " * left, line), width))
    canvas.extend(blank(width) for _ in range(height - len(canvas)))
    return canvas


def stack(blocks: Iterable[List[Text]], width: int, height: int) -> List[Text]:
    """Stack blocks vertically and force the result to width x height."""
    lines = [fit(line, width) for block in blocks for line in block]
    lines = lines[:height]
    lines.extend(blank(width) for _ in range(height - len(lines)))
    return lines
