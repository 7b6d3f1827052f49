"""
Output formatting for ranked authors.

Two modes: an ASCII table rendered by rich, and comma-delimited rows.
Both emit the same fields in the same order, one row per author in
rank order.
"""

import csv
import io
from datetime import datetime
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .blame.models import ScoredAuthor

FIELDS = ("name", "email", "score", "commits", "lines", "latest", "earliest")

# Wide enough that rows are never wrapped
_RENDER_WIDTH = 4096


def format_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def format_row(author: ScoredAuthor) -> List[str]:
    """Field values of one author, in FIELDS order."""
    return [
        author.name,
        author.email,
        str(author.display_score),
        str(author.commits),
        str(author.lines),
        format_date(author.latest),
        format_date(author.earliest),
    ]


def render_table(authors: Sequence[ScoredAuthor]) -> str:
    """Render authors as an ASCII table."""
    table = Table(box=box.ASCII, show_edge=True, header_style=None)

    for name in FIELDS:
        numeric = name in ("score", "commits", "lines")
        table.add_column(name, justify="right" if numeric else "left", no_wrap=True)

    for author in authors:
        table.add_row(*format_row(author))

    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=_RENDER_WIDTH,
        color_system=None,
        markup=False,
        highlight=False,
        emoji=False
    )
    console.print(table)
    return buffer.getvalue()


def render_delimited(authors: Sequence[ScoredAuthor]) -> str:
    """Render authors as comma-delimited rows preceded by a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(FIELDS)
    for author in authors:
        writer.writerow(format_row(author))
    return buffer.getvalue()


def render(authors: Sequence[ScoredAuthor], table: bool = True) -> str:
    return render_table(authors) if table else render_delimited(authors)
