"""
Attribution Analyzer - Main orchestrator for ranking file experts.

This module wires a history provider, the aggregator and the score
calculator into a single pipeline for one path.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

from .aggregator import AttributionAggregator
from .models import AttributionReport, ExpertsConfig, LineRange, WeightVector
from .providers.base import HistoryProvider
from .ranges import merge_line_ranges
from .scoring.calculator import AttributionScoreCalculator

logger = logging.getLogger(__name__)


class AttributionAnalyzer:
    """
    Main orchestrator for attribution ranking.

    Coordinates between:
    - History provider (per-line blame records)
    - Aggregator (per-author statistics)
    - Score calculator (weighted, ranked scores)

    Usage:
        provider = LocalGitProvider("/path/to/repo")
        analyzer = AttributionAnalyzer(provider)

        report = analyzer.analyze("src/main.py", [LineRange(10, 40)])
        for author in report.authors:
            print(author.rank, author.name, author.display_score)
    """

    def __init__(
        self,
        provider: HistoryProvider,
        calculator: Optional[AttributionScoreCalculator] = None,
        config: Optional[ExpertsConfig] = None
    ):
        """
        Initialize the attribution analyzer.

        Args:
            provider: History provider for per-line attribution
            calculator: Optional custom score calculator
            config: Optional configuration
        """
        self.provider = provider
        self.config = config or ExpertsConfig()
        self.calculator = calculator or AttributionScoreCalculator(config=self.config)

    def analyze(
        self,
        file_path: str,
        line_ranges: Optional[Sequence[LineRange]] = None,
        weights: Optional[WeightVector] = None,
        reference_time: Optional[datetime] = None
    ) -> AttributionReport:
        """
        Rank the authors of a file (or of some of its lines).

        Args:
            file_path: Path to the file
            line_ranges: Optional line ranges; overlapping ranges are unioned
            weights: Optional weights (defaults to the configured weights)
            reference_time: Optional reference point for age-based factors

        Returns:
            AttributionReport with authors in rank order

        Raises:
            HistoryUnavailable: the path has no tracked history
            InvalidLineRange: a range falls outside the file
            InvalidWeightSpec: the weights would overflow the display score
        """
        weights = self.calculator.check_weights(weights or self.config.weights)
        ranges = merge_line_ranges(line_ranges or [])
        records = self.provider.get_attribution(file_path, ranges or None)

        aggregation = AttributionAggregator().aggregate(records)
        logger.debug(
            "%s: %d line(s) from %d author(s)",
            file_path,
            aggregation.record_count,
            len(aggregation.authors)
        )

        authors = self.calculator.score(
            aggregation,
            weights,
            reference_time
        )

        for author in authors:
            logger.debug("Ranked %s", author.to_dict())

        return AttributionReport(
            path=file_path,
            authors=authors,
            line_ranges=ranges,
            record_count=aggregation.record_count,
            malformed_count=aggregation.malformed_count
        )


def create_analyzer(
    repo_path: str = ".",
    config: Optional[ExpertsConfig] = None
) -> AttributionAnalyzer:
    """
    Factory function to create an AttributionAnalyzer with default components.

    Args:
        repo_path: Any directory inside the git repository
        config: Optional configuration

    Returns:
        Configured AttributionAnalyzer instance

    Raises:
        HistoryUnavailable: no repository was found at repo_path
    """
    from .providers import LocalGitProvider

    config = config or ExpertsConfig()

    provider = LocalGitProvider(repo_path, config)
    calculator = AttributionScoreCalculator(config=config)

    return AttributionAnalyzer(
        provider=provider,
        calculator=calculator,
        config=config
    )
