"""
Scoring package for attribution ranking.

This package contains the scoring factors and the calculator
that combines them into a ranked list of authors.
"""

from .factors import (
    ScoringFactor,
    CommitsFactor,
    LinesFactor,
    LatestFactor,
    EarliestFactor,
    get_default_factors
)
from .calculator import AttributionScoreCalculator

__all__ = [
    'ScoringFactor',
    'CommitsFactor',
    'LinesFactor',
    'LatestFactor',
    'EarliestFactor',
    'get_default_factors',
    'AttributionScoreCalculator'
]
