"""
Scoring factors for attribution ranking.

Each factor turns one metric of an author's AuthorStats into a raw value
and normalizes it to [0, 1] against the largest raw value observed in
the run (the minimum is pinned at 0, not at the observed minimum).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from ..models import EPOCH, AuthorStats, ScoringContext


class ScoringFactor(ABC):
    """
    Abstract base class for scoring factors.

    Subclasses supply the raw value; normalization is shared so that
    every factor obeys the same max-relative rule and zero guard.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier, matching a WeightVector field."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this factor measures."""
        pass

    @abstractmethod
    def raw_value(self, stats: AuthorStats, reference_time: datetime) -> float:
        """
        Non-negative raw value of this metric for one author.

        Args:
            stats: Aggregated statistics of the author
            reference_time: Point in time ages are measured back from

        Returns:
            Raw value; larger means more knowledgeable
        """
        pass

    def calculate(self, stats: AuthorStats, context: ScoringContext) -> float:
        """
        Normalize the author's raw value against the run maximum.

        Returns:
            Score between 0.0 and 1.0; 0.0 for everyone when the maximum is 0
        """
        maximum = context.maxima.get(self.name, 0.0)
        if maximum <= 0:
            return 0.0

        value = self.raw_value(stats, context.reference_time)
        return min(1.0, max(0.0, value / maximum))


class CommitsFactor(ScoringFactor):
    """
    Number of distinct commits that still own lines in the file.

    One commit owning many lines counts once.
    """

    @property
    def name(self) -> str:
        return "commits"

    @property
    def description(self) -> str:
        return "Distinct commits attributed to the author"

    def raw_value(self, stats: AuthorStats, reference_time: datetime) -> float:
        return float(stats.commit_count)


class LinesFactor(ScoringFactor):
    """Number of surviving lines attributed to the author."""

    @property
    def name(self) -> str:
        return "lines"

    @property
    def description(self) -> str:
        return "Surviving lines attributed to the author"

    def raw_value(self, stats: AuthorStats, reference_time: datetime) -> float:
        return float(stats.line_count)


class LatestFactor(ScoringFactor):
    """
    Recency of the author's newest surviving change.

    Normalized directly: seconds since the Unix epoch of ``latest``
    divided by the largest such value, so the most recent author gets
    1.0.
    """

    @property
    def name(self) -> str:
        return "latest"

    @property
    def description(self) -> str:
        return "Most recent surviving change (newer scores higher)"

    def raw_value(self, stats: AuthorStats, reference_time: datetime) -> float:
        if stats.latest is None:
            return 0.0
        return max(0.0, (stats.latest - EPOCH).total_seconds())


class EarliestFactor(ScoringFactor):
    """
    Long-standing familiarity with the file.

    The raw value is the age of the author's oldest surviving change,
    measured back from the run's reference time, so an older ``earliest``
    scores higher.
    """

    @property
    def name(self) -> str:
        return "earliest"

    @property
    def description(self) -> str:
        return "Age of the oldest surviving change (older scores higher)"

    def raw_value(self, stats: AuthorStats, reference_time: datetime) -> float:
        if stats.earliest is None:
            return 0.0
        # Changes dated after the reference time (clock skew) count as age 0
        return max(0.0, (reference_time - stats.earliest).total_seconds())


def get_default_factors() -> List[ScoringFactor]:
    """
    Get the default set of scoring factors.

    Returns:
        One factor per WeightVector field, in weight order
    """
    return [
        CommitsFactor(),
        LinesFactor(),
        LatestFactor(),
        EarliestFactor()
    ]
