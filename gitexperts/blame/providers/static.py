"""
In-memory history provider.

Serves pre-built attribution records, for tests and for callers that
extract blame data themselves.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from ..errors import HistoryUnavailable
from ..models import LineRange, RawAttributionRecord
from ..ranges import contains, resolve_line_ranges
from .base import HistoryProvider


class StaticHistoryProvider(HistoryProvider):
    """
    HistoryProvider over records held in memory.

    Usage:
        provider = StaticHistoryProvider({"src/main.py": records})
        analyzer = AttributionAnalyzer(provider)
    """

    def __init__(
        self,
        files: Optional[Dict[str, Iterable[RawAttributionRecord]]] = None,
        repo_path: str = "<memory>"
    ):
        self._files: Dict[str, List[RawAttributionRecord]] = {}
        self._repo_path = repo_path

        for path, records in (files or {}).items():
            self.add_file(path, records)

    def add_file(self, file_path: str, records: Iterable[RawAttributionRecord]) -> None:
        """Register (or replace) the records of a file."""
        self._files[file_path] = sorted(records, key=lambda r: r.line_number)

    @property
    def repo_path(self) -> str:
        return self._repo_path

    def line_count(self, file_path: str) -> int:
        records = self._records(file_path)
        return max((r.line_number for r in records), default=0)

    def get_attribution(
        self,
        file_path: str,
        line_ranges: Optional[Sequence[LineRange]] = None
    ) -> Iterator[RawAttributionRecord]:
        records = self._records(file_path)

        if not line_ranges:
            return iter(records)

        ranges = resolve_line_ranges(line_ranges, self.line_count(file_path))
        return (r for r in records if contains(ranges, r.line_number))

    def _records(self, file_path: str) -> List[RawAttributionRecord]:
        try:
            return self._files[file_path]
        except KeyError:
            raise HistoryUnavailable(f"No history for {file_path}") from None
