"""
Attribution score calculator.

This module combines the normalized scoring factors under a WeightVector
and turns the aggregated authors of one file into a ranked list.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..errors import InvalidWeightSpec
from ..models import (
    AggregationResult,
    AuthorIdentity,
    AuthorStats,
    ExpertsConfig,
    ScoredAuthor,
    ScoringContext,
    WeightVector
)
from .factors import ScoringFactor, get_default_factors

logger = logging.getLogger(__name__)

AuthorTable = Union[AggregationResult, Mapping[AuthorIdentity, AuthorStats]]


class AttributionScoreCalculator:
    """
    Scores and ranks the authors of a file.

    score = sum(weight[f] * f.calculate(author)) over all factors. Authors
    are sorted by score descending; ties go to more commits, then the
    earlier first change, then canonical email. Ranks are dense.
    """

    def __init__(
        self,
        factors: Optional[List[ScoringFactor]] = None,
        config: Optional[ExpertsConfig] = None
    ):
        """
        Initialize the calculator.

        Args:
            factors: Optional list of scoring factors (uses defaults if not provided)
            config: Optional configuration for default weights and score scale
        """
        self.factors = factors or get_default_factors()
        self.config = config or ExpertsConfig()

        names = set(self.config.weights.as_dict())
        unknown = [f.name for f in self.factors if f.name not in names]
        if unknown:
            raise ValueError(f"Scoring factors without a weight: {', '.join(unknown)}")

    def build_context(
        self,
        authors: Iterable[AuthorStats],
        reference_time: Optional[datetime] = None
    ) -> ScoringContext:
        """
        Collect the per-factor maxima for one run.

        Args:
            authors: All authors of the run
            reference_time: Point ages are measured from (defaults to now)
        """
        reference_time = _as_utc(reference_time or datetime.now(timezone.utc))
        authors = list(authors)

        maxima: Dict[str, float] = {}
        for factor in self.factors:
            values = [factor.raw_value(stats, reference_time) for stats in authors]
            maxima[factor.name] = max(values, default=0.0)

        return ScoringContext(reference_time=reference_time, maxima=maxima)

    def score(
        self,
        authors: AuthorTable,
        weights: Optional[WeightVector] = None,
        reference_time: Optional[datetime] = None
    ) -> List[ScoredAuthor]:
        """
        Score and rank every author.

        Args:
            authors: Aggregation result, or a mapping of identity to stats
            weights: Weight vector (defaults to the configured weights)
            reference_time: Point ages are measured from (defaults to now)

        Returns:
            ScoredAuthors in rank order

        Raises:
            InvalidWeightSpec: the weights would overflow the display score
        """
        if isinstance(authors, AggregationResult):
            authors = authors.authors

        weights = self.check_weights(weights or self.config.weights)
        logger.debug("Scoring %d author(s) with weights %s", len(authors), weights)
        weight_map = weights.as_dict()
        context = self.build_context(authors.values(), reference_time)

        scored: List[Tuple[AuthorStats, float, Dict[str, float]]] = []
        for stats in authors.values():
            factor_scores: Dict[str, float] = {}
            weighted_sum = 0.0

            for factor in self.factors:
                value = factor.calculate(stats, context)
                factor_scores[factor.name] = value
                weighted_sum += weight_map[factor.name] * value

            scored.append((stats, weighted_sum, factor_scores))

        scored.sort(key=lambda item: _sort_key(item[0], item[1]))

        results: List[ScoredAuthor] = []
        rank = 0
        previous = None
        for stats, total, factor_scores in scored:
            key = _rank_key(stats, total)
            if key != previous:
                rank += 1
                previous = key

            results.append(ScoredAuthor(
                stats=stats,
                score=total,
                rank=rank,
                display_score=self.display_score(total),
                factors=factor_scores
            ))

        return results

    def check_weights(self, weights: WeightVector) -> WeightVector:
        """
        Reject weights whose largest possible display score overflows.

        Every normalized factor is at most 1, so no score can exceed
        ``weights.total``.

        Raises:
            InvalidWeightSpec: ``weights.total * score_scale`` is not finite
        """
        if not math.isfinite(weights.total * self.config.score_scale):
            raise InvalidWeightSpec(
                f"Weights {weights} are too large to score with scale {self.config.score_scale:g}"
            )
        return weights

    def display_score(self, score: float) -> int:
        """Scale a raw score for display, rounding to the nearest integer."""
        return int(round(score * self.config.score_scale))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _rank_key(stats: AuthorStats, score: float) -> tuple:
    """Fields that decide rank; equal keys share a rank."""
    return (score, stats.commit_count, stats.earliest, stats.identity.email)


def _sort_key(stats: AuthorStats, score: float) -> tuple:
    earliest = stats.earliest.timestamp() if stats.earliest else math.inf
    return (
        -score,
        -stats.commit_count,
        earliest,
        stats.identity.email,
        # Only separates identities that share every ranking field
        stats.identity.key
    )
