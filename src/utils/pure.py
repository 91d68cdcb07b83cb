from datetime import datetime
from typing import List, Literal, Optional


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows, each a list of strings.
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all center ('c').

    Returns:
        str: Markdown formatted table.
    """
    if not rows:
        return ""

    # If no headers, take the first row as header and remove it from rows
    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = list(map(str, headers))
    rows = [list(map(str, row)) for row in rows]

    num_cols = len(headers)
    if aligns is None:
        aligns = ["c"] * num_cols
    elif len(aligns) != num_cols:
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {
        "l": ":---",
        "c": ":---:",
        "r": "---:",
    }

    header_line = "| " + " | ".join(headers) + " |"
    align_line = "| " + " | ".join(align_map[a] for a in aligns) + " |"
    row_lines = ["| " + " | ".join(map(str, row)) + " |" for row in rows]

    return "\n".join([header_line, align_line, *row_lines])


def format_ugx(amount: int) -> str:
    """Format a whole-shilling amount, e.g. 4500 -> 'UGX 4,500'."""
    return f"UGX {amount:,}"


def format_long_date(when: datetime) -> str:
    """e.g. 'Monday, October 19, 2026'"""
    return f"{when:%A}, {when:%B} {when.day}, {when.year}"


def format_short_time(when: datetime) -> str:
    """e.g. '04:05 PM'"""
    return when.strftime("%I:%M %p")


def format_timestamp(when: datetime) -> str:
    """e.g. 'Oct 19, 2026, 04:05 PM'"""
    return f"{when:%b} {when.day}, {when.year}, {format_short_time(when)}"
