"""
Data models for file attribution analysis.

This module defines the dataclasses that flow through the pipeline:
raw blame records from a history provider, canonical author identities,
per-author accumulators and the final scored, ranked authors.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Union

from .errors import InvalidWeightSpec


# Substituted for timestamps that cannot be interpreted.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

TimestampLike = Union[datetime, int, float, str, None]


@dataclass(frozen=True)
class RawAttributionRecord:
    """
    One surviving source line and the commit that last touched it.

    commit_timestamp is normally a UTC datetime; anything else is
    coerced (or replaced by EPOCH) by the aggregator.
    """
    line_number: int
    commit_id: str
    author_name: str
    author_email: str
    commit_timestamp: TimestampLike


@dataclass(frozen=True)
class AuthorIdentity:
    """
    Canonical author key.

    Equality and hashing use only ``key``/``email``; ``name`` is carried
    for display. An identity without an email is keyed by name instead
    (degraded mode).
    """
    key: str
    email: str
    name: str = field(default="", compare=False)

    @property
    def is_degraded(self) -> bool:
        """True when the identity had to fall back to a name key."""
        return not self.email


@dataclass
class AuthorStats:
    """Per-author accumulator filled by the aggregator."""
    identity: AuthorIdentity
    display_name: str
    display_email: str
    commit_ids: Set[str] = field(default_factory=set)
    line_count: int = 0
    earliest: Optional[datetime] = None
    latest: Optional[datetime] = None

    @property
    def commit_count(self) -> int:
        return len(self.commit_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.display_name,
            "email": self.display_email,
            "commits": self.commit_count,
            "lines": self.line_count,
            "earliest": self.earliest.isoformat() if self.earliest else None,
            "latest": self.latest.isoformat() if self.latest else None,
        }


@dataclass(frozen=True)
class ScoredAuthor:
    """
    An author's final standing for one file.

    ``score`` is the unscaled weighted sum; ``display_score`` is the
    scaled, rounded value shown to users.
    """
    stats: AuthorStats
    score: float
    rank: int
    display_score: int
    factors: Dict[str, float] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.stats.display_name

    @property
    def email(self) -> str:
        return self.stats.display_email

    @property
    def commits(self) -> int:
        return self.stats.commit_count

    @property
    def lines(self) -> int:
        return self.stats.line_count

    @property
    def latest(self) -> Optional[datetime]:
        return self.stats.latest

    @property
    def earliest(self) -> Optional[datetime]:
        return self.stats.earliest

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.stats.to_dict(),
            "rank": self.rank,
            "score": self.display_score,
            "factors": {k: round(v, 4) for k, v in self.factors.items()},
        }


@dataclass(frozen=True)
class WeightVector:
    """
    Coefficients applied to the four normalized metrics.

    Weights must be finite and non-negative; they need not sum to 1.
    """
    commits: float = 1.0
    lines: float = 1.0
    latest: float = 1.0
    earliest: float = 1.0

    def __post_init__(self):
        for name, value in self.as_dict().items():
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise InvalidWeightSpec(f"Weight '{name}' must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0:
                raise InvalidWeightSpec(
                    f"Weight '{name}' must be a finite non-negative number, got {value!r}"
                )

    @classmethod
    def parse(cls, spec: str) -> "WeightVector":
        """
        Parse ``"<commits>,<lines>,<latest>,<earliest>"``.

        Raises:
            InvalidWeightSpec: wrong count, non-numeric or negative values
        """
        parts = [p.strip() for p in (spec or "").split(",")]
        if len(parts) != 4:
            raise InvalidWeightSpec(
                f"Expected 4 comma-separated weights (commits,lines,latest,earliest), got {spec!r}"
            )

        values: List[float] = []
        for part in parts:
            try:
                values.append(float(part))
            except ValueError:
                raise InvalidWeightSpec(f"Weight {part!r} is not a number") from None

        return cls(*values)

    def as_dict(self) -> Dict[str, float]:
        return {
            "commits": self.commits,
            "lines": self.lines,
            "latest": self.latest,
            "earliest": self.earliest,
        }

    @property
    def total(self) -> float:
        return self.commits + self.lines + self.latest + self.earliest

    def __str__(self) -> str:
        return ",".join(f"{v:g}" for v in self.as_dict().values())


@dataclass(frozen=True)
class LineRange:
    """Inclusive 1-based line range; ``end=None`` runs to end of file."""
    start: int
    end: Optional[int] = None

    def resolve(self, line_count: int) -> "LineRange":
        """Close an open-ended range at ``line_count``."""
        if self.end is None:
            return LineRange(self.start, line_count)
        return self

    def __str__(self) -> str:
        return f"{self.start},{self.end}" if self.end is not None else f"{self.start},"


@dataclass
class ScoringContext:
    """
    Run-wide data that every scoring factor normalizes against.

    ``maxima`` maps factor name to the largest raw value observed in the
    run. Ages are measured in seconds back from ``reference_time``.
    """
    reference_time: datetime
    maxima: Dict[str, float] = field(default_factory=dict)


@dataclass
class ExpertsConfig:
    """
    Configuration for attribution analysis.

    Defaults are stable and documented; see gitexperts.config for the
    environment variables that override them.
    """
    weights: WeightVector = field(default_factory=WeightVector)

    # Multiplier applied to raw scores before rounding for display
    score_scale: float = 100.0

    # History extraction
    rev: str = "HEAD"
    detect_moves: bool = False
    detect_copies: bool = False
    first_parent: bool = False

    # Output
    table: bool = True
    log_level: str = "WARNING"


@dataclass
class AggregationResult:
    """Output of one aggregation pass."""
    authors: Dict[AuthorIdentity, AuthorStats] = field(default_factory=dict)
    record_count: int = 0
    malformed_count: int = 0

    @property
    def total_lines(self) -> int:
        return sum(s.line_count for s in self.authors.values())


@dataclass
class AttributionReport:
    """Ranked attribution for one path."""
    path: str
    authors: List[ScoredAuthor]
    line_ranges: List[LineRange] = field(default_factory=list)
    record_count: int = 0
    malformed_count: int = 0
