"""
Local git history provider implementation using GitPython.

This module produces per-line attribution for files of a local
repository from ``git blame --incremental``.
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from git import Repo
from git.exc import BadName, GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects import Blob, Commit

from ..errors import HistoryUnavailable
from ..models import ExpertsConfig, LineRange, RawAttributionRecord
from ..ranges import resolve_line_ranges
from .base import HistoryProvider

logger = logging.getLogger(__name__)


def count_lines(data: bytes) -> int:
    """Count lines the way git blame does; a missing final newline still ends a line."""
    if not data:
        return 0
    return data.count(b"\n") + (0 if data.endswith(b"\n") else 1)


class LocalGitProvider(HistoryProvider):
    """
    History provider for local repositories.

    Features:
    - Repository discovery from any directory inside the working tree
    - Line range restriction (``-L``) validated against the blamed revision
    - Optional move/copy detection (``-M``/``-C``) and first-parent blame
    """

    def __init__(self, repo_path: str = ".", config: Optional[ExpertsConfig] = None):
        """
        Initialize the local git provider.

        Args:
            repo_path: Any directory inside the repository
            config: Optional configuration for revision and blame options

        Raises:
            HistoryUnavailable: no repository with a working tree was found
        """
        self._config = config or ExpertsConfig()

        try:
            self._repo = Repo(repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise HistoryUnavailable(f"Not a git repository: {os.path.abspath(repo_path)}") from e

        if self._repo.bare or not self._repo.working_tree_dir:
            raise HistoryUnavailable(f"Repository has no working tree: {self._repo.git_dir}")

        self._repo_path = os.path.realpath(self._repo.working_tree_dir)

    @property
    def repo_path(self) -> str:
        return self._repo_path

    def relative_path(self, file_path: str) -> str:
        """
        Convert a path to repo-relative POSIX form.

        Absolute paths must lie inside the working tree. Relative paths
        are taken relative to the current directory when it is inside
        the working tree, the way git itself reads them, and relative to
        the repository root otherwise. When only the other reading names
        a tracked file (or, outside the tree, an existing file inside it),
        that reading is used.

        Raises:
            HistoryUnavailable: the path lies outside the repository
        """
        candidate = Path(file_path)

        if candidate.is_absolute():
            return self._repo_relative(candidate, file_path)

        root_relative = PurePosixPath(os.path.normpath(file_path).replace(os.sep, "/")).as_posix()

        cwd = Path(os.path.realpath(os.getcwd()))
        try:
            cwd.relative_to(self._repo_path)
        except ValueError:
            if not self._is_tracked(root_relative) and candidate.exists():
                return self._repo_relative(cwd / candidate, file_path)
            return root_relative

        cwd_relative = self._repo_relative(cwd / candidate, file_path)
        if cwd_relative != root_relative and not self._is_tracked(cwd_relative) \
                and self._is_tracked(root_relative):
            return root_relative
        return cwd_relative

    def _repo_relative(self, path: Path, file_path: str) -> str:
        path = Path(os.path.normpath(path))
        absolute = Path(os.path.realpath(path.parent)) / path.name
        try:
            relative = absolute.relative_to(self._repo_path)
        except ValueError as e:
            raise HistoryUnavailable(
                f"{file_path} is outside the repository {self._repo_path}"
            ) from e
        return relative.as_posix()

    def _is_tracked(self, path: str) -> bool:
        try:
            self._commit().tree / path
        except KeyError:
            return False
        return True

    def _commit(self) -> Commit:
        try:
            return self._repo.commit(self._config.rev)
        except (BadName, ValueError, GitCommandError) as e:
            raise HistoryUnavailable(
                f"Revision {self._config.rev!r} does not exist in {self._repo_path}"
            ) from e

    def _blob(self, path: str) -> Blob:
        commit = self._commit()
        try:
            item = commit.tree / path
        except KeyError:
            raise HistoryUnavailable(
                f"{path} is not tracked at {self._config.rev}"
            ) from None

        if item.type != "blob":
            raise HistoryUnavailable(f"{path} is not a file at {self._config.rev}")

        return item

    def line_count(self, file_path: str) -> int:
        blob = self._blob(self.relative_path(file_path))
        return count_lines(blob.data_stream.read())

    def _blame_options(self, ranges: Sequence[LineRange]) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if self._config.detect_moves:
            options["M"] = True
        if self._config.detect_copies:
            options["C"] = True
        if self._config.first_parent:
            options["first_parent"] = True
        if ranges:
            options["L"] = [f"{r.start},{r.end}" for r in ranges]
        return options

    def get_attribution(
        self,
        file_path: str,
        line_ranges: Optional[Sequence[LineRange]] = None
    ) -> Iterator[RawAttributionRecord]:
        """Blame a file at the configured revision."""
        path = self.relative_path(file_path)
        blob = self._blob(path)
        total_lines = count_lines(blob.data_stream.read())

        ranges: List[LineRange] = []
        if line_ranges:
            ranges = resolve_line_ranges(line_ranges, total_lines)

        if total_lines == 0:
            return iter(())

        options = self._blame_options(ranges)
        logger.debug("Blaming %s at %s with %s", path, self._config.rev, options)

        try:
            entries = list(self._repo.blame_incremental(self._config.rev, path, **options))
        except GitCommandError as e:
            raise HistoryUnavailable(f"git blame failed for {path}: {e.stderr.strip()}") from e

        entries.sort(key=lambda entry: entry.linenos.start)
        return self._records(entries)

    def _records(self, entries: Iterable[Any]) -> Iterator[RawAttributionRecord]:
        for entry in entries:
            commit = entry.commit
            timestamp = datetime.fromtimestamp(commit.authored_date, tz=timezone.utc)

            for line_number in entry.linenos:
                yield RawAttributionRecord(
                    line_number=line_number,
                    commit_id=commit.hexsha,
                    author_name=commit.author.name,
                    author_email=commit.author.email,
                    commit_timestamp=timestamp
                )
