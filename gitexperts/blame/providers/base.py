"""
Abstract history provider interface.

A history provider is the boundary between the attribution pipeline and
the version-control system: it turns a path (and optional line filter)
into one RawAttributionRecord per surviving line.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence

from ..models import LineRange, RawAttributionRecord


class HistoryProvider(ABC):
    """
    Abstract interface for per-line attribution.

    Implementations include:
    - LocalGitProvider (GitPython blame over a local repository)
    - StaticHistoryProvider (pre-built records, for tests and embedding)
    """

    @abstractmethod
    def get_attribution(
        self,
        file_path: str,
        line_ranges: Optional[Sequence[LineRange]] = None
    ) -> Iterator[RawAttributionRecord]:
        """
        Get the attribution record of every line of a file.

        Args:
            file_path: Path to the file
            line_ranges: Optional inclusive ranges to restrict to; they are
                         merged before use

        Returns:
            Records ordered by line number

        Raises:
            HistoryUnavailable: the path has no tracked history
            InvalidLineRange: a range falls outside the file
        """
        pass

    @abstractmethod
    def line_count(self, file_path: str) -> int:
        """
        Number of lines of the file at the blamed revision.

        Raises:
            HistoryUnavailable: the path has no tracked history
        """
        pass

    @property
    @abstractmethod
    def repo_path(self) -> str:
        """Get the repository path."""
        pass
