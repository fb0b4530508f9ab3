"""
Markdown Formatting Helpers
===========================

Pure functions that turn vendor values (numbers, micros, rates, seconds)
into the strings shown in tool responses.

Every helper accepts either a number or a numeric string, because the
vendor SDKs disagree on which one they hand back (GA4 metric values and
protobuf int64 fields arrive as strings). Values that cannot be parsed
are returned unchanged as text.
"""

import math
from typing import Any, List, Optional, Sequence, Union

Numeric = Union[int, float, str]

NO_DATA = "No data found."


def _to_float(value: Any) -> Optional[float]:
    """Parse a number or numeric string, None if it is not one"""
    if isinstance(value, bool):
        return float(value)
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(num):
        return None
    return num


def round_half_up(num: float, digits: int = 0) -> float:
    """Round with halves going away from zero (round() rounds half to even)"""
    factor = 10 ** digits
    return math.floor(abs(num) * factor + 0.5) / factor * (1 if num >= 0 else -1)


def markdown_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """
    Render rows as a padded markdown table.

    Args:
        headers: Column titles
        rows: Cell values, one list per row. Short rows render empty cells.

    Returns:
        The table, or "No data found." when there are no rows.
    """
    if not rows:
        return NO_DATA

    widths = []
    for i, header in enumerate(headers):
        data_width = max((len(row[i] or "") if i < len(row) else 0) for row in rows)
        widths.append(max(len(header), data_width))

    def render(cells: Sequence[str]) -> str:
        padded = []
        for i, width in enumerate(widths):
            cell = cells[i] if i < len(cells) else ""
            padded.append((cell or "").ljust(width))
        return "| " + " | ".join(padded) + " |"

    lines = [render(headers), "| " + " | ".join("-" * w for w in widths) + " |"]
    lines.extend(render(row) for row in rows)
    return "\n".join(lines)


def format_number(value: Numeric) -> str:
    """Format a number with thousands separators (up to 3 decimals)"""
    num = _to_float(value)
    if num is None:
        return str(value)
    rounded = round_half_up(num, 3)
    if rounded.is_integer():
        return f"{int(rounded):,}"
    return f"{rounded:,.3f}".rstrip("0").rstrip(".")


def format_percent(value: Numeric, already_percent: bool = False) -> str:
    """Format a 0-1 fraction (or a 0-100 value with already_percent) as a percentage"""
    num = _to_float(value)
    if num is None:
        return str(value)
    pct = num if already_percent else num * 100
    return f"{round_half_up(pct, 2):.2f}%"


def format_currency(micros: Numeric) -> str:
    """Format a Google Ads micros amount as dollars"""
    num = _to_float(micros)
    if num is None:
        return str(micros)
    return f"${round_half_up(num / 1_000_000, 2):.2f}"


def format_dollars(value: Numeric) -> str:
    """Format a raw currency amount as dollars"""
    num = _to_float(value)
    if num is None:
        return str(value)
    return f"${round_half_up(num, 2):.2f}"


def format_duration(seconds: Numeric) -> str:
    """Format seconds as "Xm Ys" (or "Ys" under a minute)"""
    num = _to_float(seconds)
    if num is None:
        return str(seconds)
    total = int(round_half_up(num))
    mins, secs = divmod(total, 60) if total >= 0 else (0, total)
    if mins == 0:
        return f"{secs}s"
    return f"{mins}m {secs}s"


def format_change(current: float, previous: float) -> str:
    """Percentage change between two periods, N/A when there is no baseline"""
    if previous == 0:
        return "N/A (no previous data)"
    change = (current - previous) / previous * 100
    sign = "+" if change > 0 else ""
    return f"{sign}{round_half_up(change, 1):.1f}%"


def truncate(text: Optional[str], width: int) -> str:
    """Cut a label to width characters for table cells"""
    return (text or "")[:width]


def bullet_list(items: List[tuple]) -> str:
    """Render (label, value) pairs as bold markdown bullets"""
    return "".join(f"- **{label}:** {value}\n" for label, value in items)
