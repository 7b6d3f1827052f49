"""
Exceptions raised by the attribution pipeline.

Fatal errors (HistoryUnavailable, InvalidLineRange, InvalidWeightSpec)
abort a run before any output is produced. MalformedRecord is only ever
raised internally and absorbed by the aggregator.
"""


class GitExpertsError(Exception):
    """Base class for all git-experts errors."""


class HistoryUnavailable(GitExpertsError):
    """The repository or the requested path has no usable history."""


class InvalidLineRange(GitExpertsError, ValueError):
    """A requested line range is malformed or outside the file."""


class InvalidWeightSpec(GitExpertsError, ValueError):
    """A weight specification is not four non-negative numbers."""


class MalformedRecord(GitExpertsError):
    """A raw attribution record carries an unusable field."""
