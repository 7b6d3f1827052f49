"""
Attribution module for ranking the people who know a file best.

This module combines per-line blame with per-commit metadata into a
weighted score per author, based on:
- Distinct commits that still own lines
- Surviving lines
- Most recent change
- Oldest surviving change

Usage:
    from gitexperts.blame import create_analyzer, WeightVector

    analyzer = create_analyzer("/path/to/repo")
    report = analyzer.analyze("src/main.py", weights=WeightVector.parse("1,2,1,1"))
    print(report.authors[0].name)
"""

# Models
from .models import (
    EPOCH,
    RawAttributionRecord,
    AuthorIdentity,
    AuthorStats,
    ScoredAuthor,
    WeightVector,
    LineRange,
    ScoringContext,
    ExpertsConfig,
    AggregationResult,
    AttributionReport
)

# Errors
from .errors import (
    GitExpertsError,
    HistoryUnavailable,
    InvalidLineRange,
    InvalidWeightSpec,
    MalformedRecord
)

# Identity, aggregation, line ranges
from .identity import normalize
from .aggregator import AttributionAggregator, aggregate, coerce_timestamp
from .ranges import parse_line_range, merge_line_ranges, resolve_line_ranges

# Providers
from .providers import HistoryProvider, LocalGitProvider, StaticHistoryProvider

# Scoring
from .scoring import (
    ScoringFactor,
    CommitsFactor,
    LinesFactor,
    LatestFactor,
    EarliestFactor,
    get_default_factors,
    AttributionScoreCalculator
)

# Main analyzer
from .analyzer import AttributionAnalyzer, create_analyzer

__all__ = [
    # Models
    'EPOCH',
    'RawAttributionRecord',
    'AuthorIdentity',
    'AuthorStats',
    'ScoredAuthor',
    'WeightVector',
    'LineRange',
    'ScoringContext',
    'ExpertsConfig',
    'AggregationResult',
    'AttributionReport',

    # Errors
    'GitExpertsError',
    'HistoryUnavailable',
    'InvalidLineRange',
    'InvalidWeightSpec',
    'MalformedRecord',

    # Pipeline
    'normalize',
    'AttributionAggregator',
    'aggregate',
    'coerce_timestamp',
    'parse_line_range',
    'merge_line_ranges',
    'resolve_line_ranges',

    # Providers
    'HistoryProvider',
    'LocalGitProvider',
    'StaticHistoryProvider',

    # Scoring
    'ScoringFactor',
    'CommitsFactor',
    'LinesFactor',
    'LatestFactor',
    'EarliestFactor',
    'get_default_factors',
    'AttributionScoreCalculator',

    # Analyzer
    'AttributionAnalyzer',
    'create_analyzer'
]
