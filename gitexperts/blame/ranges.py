"""
Line range parsing and merging for ``-L <start>[,<end>]`` filters.
"""

import re
from typing import Iterable, List, Optional

from .errors import InvalidLineRange
from .models import LineRange

_RANGE = re.compile(r"^\s*(\d+)\s*(?:,\s*(\d*)\s*)?$")


def parse_line_range(text: str) -> LineRange:
    """
    Parse ``"<start>"``, ``"<start>,"`` or ``"<start>,<end>"``.

    A missing end means "to the end of the file".

    Raises:
        InvalidLineRange: malformed text, start < 1 or end < start
    """
    match = _RANGE.match(text or "")
    if not match:
        raise InvalidLineRange(f"Invalid line range {text!r}, expected <start>[,<end>]")

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else None
    return _checked(LineRange(start, end))


def _checked(line_range: LineRange) -> LineRange:
    if line_range.start < 1:
        raise InvalidLineRange(f"Line numbers start at 1, got {line_range}")
    if line_range.end is not None and line_range.end < line_range.start:
        raise InvalidLineRange(f"Line range {line_range} ends before it starts")
    return line_range


def merge_line_ranges(ranges: Iterable[LineRange]) -> List[LineRange]:
    """
    Union line ranges into a sorted list of disjoint, non-adjacent ranges.

    An open-ended range absorbs every range that starts inside or after it.
    """
    merged: List[LineRange] = []

    for current in sorted((_checked(r) for r in ranges), key=lambda r: r.start):
        if not merged:
            merged.append(current)
            continue

        last = merged[-1]
        if last.end is None or current.start <= last.end + 1:
            end: Optional[int]
            if last.end is None or current.end is None:
                end = None
            else:
                end = max(last.end, current.end)
            merged[-1] = LineRange(last.start, end)
        else:
            merged.append(current)

    return merged


def resolve_line_ranges(ranges: Iterable[LineRange], line_count: int) -> List[LineRange]:
    """
    Merge ranges and close them against the file's current line count.

    Raises:
        InvalidLineRange: if any range falls outside lines 1..line_count
    """
    resolved: List[LineRange] = []

    for line_range in merge_line_ranges(ranges):
        if line_range.start > line_count or (line_range.end or 0) > line_count:
            raise InvalidLineRange(
                f"Line range {line_range} is outside the file, which has {line_count} line(s)"
            )
        resolved.append(line_range.resolve(line_count))

    return resolved


def contains(ranges: Iterable[LineRange], line_number: int) -> bool:
    """True if ``line_number`` falls inside any of ``ranges``."""
    return any(
        r.start <= line_number and (r.end is None or line_number <= r.end)
        for r in ranges
    )
