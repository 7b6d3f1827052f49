"""
Per-author aggregation of raw attribution records.

The aggregator makes a single pass over the records a history provider
returns and builds one AuthorStats per canonical identity. Accumulation
is commutative: feeding the same records in any order produces the same
result, display values included.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, Tuple

from .errors import MalformedRecord
from .identity import clean_email, is_anonymous, normalize
from .models import (
    EPOCH,
    AggregationResult,
    AuthorIdentity,
    AuthorStats,
    RawAttributionRecord,
    TimestampLike,
)

logger = logging.getLogger(__name__)


def coerce_timestamp(value: TimestampLike) -> datetime:
    """
    Convert a record timestamp to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), POSIX seconds and
    ISO-8601 strings.

    Raises:
        MalformedRecord: if the value cannot be interpreted
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise MalformedRecord(f"Timestamp out of range: {value!r}") from e

    if isinstance(value, str):
        text = value.strip()
        try:
            return coerce_timestamp(float(text))
        except ValueError:
            pass
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return coerce_timestamp(datetime.fromisoformat(text))
        except ValueError as e:
            raise MalformedRecord(f"Unparseable timestamp: {value!r}") from e

    raise MalformedRecord(f"Unsupported timestamp: {value!r}")


class AttributionAggregator:
    """
    Streams RawAttributionRecords into per-author statistics.

    Usage:
        aggregator = AttributionAggregator()
        for record in provider.get_attribution("src/main.py"):
            aggregator.add(record)
        result = aggregator.result()

    A record is never rejected. Unusable timestamps become EPOCH and
    records without any identity go to a shared "unknown" author; both
    are counted in ``malformed_count``.
    """

    def __init__(self):
        self._authors: Dict[AuthorIdentity, AuthorStats] = {}
        # Sort key of the record each author's display values came from
        self._display_keys: Dict[AuthorIdentity, Tuple[datetime, str, str]] = {}
        self._record_count = 0
        self._malformed_count = 0

    def add(self, record: RawAttributionRecord) -> None:
        """Fold a single record into the running statistics."""
        self._record_count += 1
        malformed = False

        try:
            timestamp = coerce_timestamp(record.commit_timestamp)
        except MalformedRecord as e:
            logger.debug("Line %s of commit %s: %s", record.line_number, record.commit_id, e)
            timestamp = EPOCH
            malformed = True

        identity = normalize(record.author_name, record.author_email)
        if is_anonymous(identity):
            logger.debug("Line %s of commit %s has no author", record.line_number, record.commit_id)
            malformed = True

        if malformed:
            self._malformed_count += 1

        stats = self._authors.get(identity)
        if stats is None:
            stats = AuthorStats(identity=identity, display_name="", display_email="")
            self._authors[identity] = stats

        stats.commit_ids.add(record.commit_id)
        stats.line_count += 1

        if stats.earliest is None or timestamp < stats.earliest:
            stats.earliest = timestamp
        if stats.latest is None or timestamp > stats.latest:
            stats.latest = timestamp

        self._update_display(stats, record, timestamp)

    def _update_display(
        self,
        stats: AuthorStats,
        record: RawAttributionRecord,
        timestamp: datetime
    ) -> None:
        """
        Keep the display name/email of the author's earliest record.

        Ties on timestamp go to the lexicographically smallest pair so
        the choice does not depend on arrival order.
        """
        name = (record.author_name or "").strip() or stats.identity.name
        email = clean_email(record.author_email)

        key = (timestamp, name, email)
        current = self._display_keys.get(stats.identity)
        if current is None or key < current:
            self._display_keys[stats.identity] = key
            stats.display_name = name
            stats.display_email = email

    def aggregate(self, records: Iterable[RawAttributionRecord]) -> AggregationResult:
        """Consume ``records`` and return the accumulated result."""
        for record in records:
            self.add(record)
        return self.result()

    def result(self) -> AggregationResult:
        """Snapshot of everything aggregated so far."""
        result = AggregationResult(
            authors=dict(self._authors),
            record_count=self._record_count,
            malformed_count=self._malformed_count
        )

        if self._malformed_count:
            logger.info(
                "Absorbed %d malformed record(s) out of %d",
                self._malformed_count,
                self._record_count
            )

        return result


def aggregate(records: Iterable[RawAttributionRecord]) -> AggregationResult:
    """Aggregate ``records`` in a fresh aggregator."""
    return AttributionAggregator().aggregate(records)

