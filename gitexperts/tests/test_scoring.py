"""
Tests for the scoring factors and the score calculator.
"""

import math

import pytest

from gitexperts.blame import (
    AttributionScoreCalculator,
    AuthorStats,
    CommitsFactor,
    EarliestFactor,
    ExpertsConfig,
    InvalidWeightSpec,
    LatestFactor,
    LinesFactor,
    ScoringContext,
    WeightVector,
    aggregate,
    get_default_factors,
    normalize
)
from gitexperts.tests.helpers import record, utc

REFERENCE = utc(2021, 1, 1)


def _stats(name, email, commits, lines, earliest, latest):
    return AuthorStats(
        identity=normalize(name, email),
        display_name=name,
        display_email=email,
        commit_ids={f"{email}-{i}" for i in range(commits)},
        line_count=lines,
        earliest=earliest,
        latest=latest
    )


def _table(*stats):
    return {s.identity: s for s in stats}


def test_default_factors_match_weight_fields():
    """One factor per WeightVector field, in weight order."""
    names = [f.name for f in get_default_factors()]
    assert names == list(WeightVector().as_dict())


def test_factor_zero_maximum_guard():
    """A zero maximum normalizes every author to 0 instead of dividing by zero."""
    stats = _stats("Dev", "dev@example.com", 0, 0, None, None)
    context = ScoringContext(reference_time=REFERENCE, maxima={"commits": 0.0, "lines": 0.0})

    assert CommitsFactor().calculate(stats, context) == 0.0
    assert LinesFactor().calculate(stats, context) == 0.0
    assert LatestFactor().calculate(stats, context) == 0.0


def test_earliest_factor_prefers_older_changes():
    """Older first changes score higher; future dates clamp to 0."""
    factor = EarliestFactor()
    old = _stats("Old", "old@example.com", 1, 1, utc(2015, 1, 1), utc(2015, 1, 1))
    new = _stats("New", "new@example.com", 1, 1, utc(2020, 1, 1), utc(2020, 1, 1))
    future = _stats("Skew", "skew@example.com", 1, 1, utc(2030, 1, 1), utc(2030, 1, 1))

    assert factor.raw_value(old, REFERENCE) > factor.raw_value(new, REFERENCE)
    assert factor.raw_value(future, REFERENCE) == 0.0


def test_scenario_two_authors(scenario_records):
    """Alice (4 commits, 10 lines, newer) outranks Bob (2 commits, 12 lines)."""
    calculator = AttributionScoreCalculator()
    ranked = calculator.score(aggregate(scenario_records), WeightVector(1, 1, 1, 1), REFERENCE)

    assert [a.email for a in ranked] == ["alice@example.com", "bob@example.com"]
    assert [a.rank for a in ranked] == [1, 2]

    alice, bob = ranked
    assert alice.factors["commits"] == 1.0
    assert bob.factors["commits"] == 0.5
    assert bob.factors["lines"] == 1.0
    assert alice.factors["lines"] == pytest.approx(10 / 12)
    assert alice.factors["latest"] == 1.0
    assert bob.factors["earliest"] == 1.0
    assert alice.score > bob.score


def test_single_author_scores_sum_of_weights():
    """A lone author normalizes every metric to exactly 1."""
    records = [
        record(1, "c1", "Solo", "solo@example.com", utc(2019, 1, 1)),
        record(2, "c2", "Solo", "solo@example.com", utc(2020, 6, 1)),
        record(3, "c2", "Solo", "solo@example.com", utc(2020, 6, 1)),
    ]
    weights = WeightVector(2.0, 0.5, 1.25, 3.0)

    ranked = AttributionScoreCalculator().score(aggregate(records), weights, REFERENCE)

    assert len(ranked) == 1
    assert all(value == 1.0 for value in ranked[0].factors.values())
    assert ranked[0].score == weights.total
    assert ranked[0].display_score == 675
    assert ranked[0].rank == 1


def test_lines_only_weights_rank_by_line_count():
    """With weights 0,1,0,0 the order follows line counts, then the tie-break chain."""
    authors = _table(
        _stats("A", "a@example.com", 1, 5, utc(2020, 1, 1), utc(2020, 1, 1)),
        _stats("B", "b@example.com", 3, 20, utc(2020, 1, 1), utc(2020, 1, 1)),
        _stats("C", "c@example.com", 1, 10, utc(2020, 1, 1), utc(2020, 1, 1)),
        # Ties with C on lines; more commits wins
        _stats("D", "d@example.com", 2, 10, utc(2020, 1, 1), utc(2020, 1, 1)),
        # Ties with C on lines and commits; earlier first change wins
        _stats("E", "e@example.com", 1, 10, utc(2018, 1, 1), utc(2020, 1, 1)),
        # Ties with C on everything but email
        _stats("Z", "0@example.com", 1, 10, utc(2020, 1, 1), utc(2020, 1, 1)),
    )

    ranked = AttributionScoreCalculator().score(authors, WeightVector(0, 1, 0, 0), REFERENCE)

    assert [a.name for a in ranked] == ["B", "D", "E", "Z", "C", "A"]
    assert [a.rank for a in ranked] == [1, 2, 3, 4, 5, 6]


def test_dense_rank_for_complete_ties():
    """Identities equal on every ranking field share a rank."""
    authors = _table(
        _stats("jane", "", 1, 4, utc(2020, 1, 1), utc(2020, 1, 1)),
        _stats("john", "", 1, 4, utc(2020, 1, 1), utc(2020, 1, 1)),
        _stats("Pat", "pat@example.com", 1, 2, utc(2020, 1, 1), utc(2020, 1, 1)),
    )

    ranked = AttributionScoreCalculator().score(authors, WeightVector(), REFERENCE)

    assert [a.rank for a in ranked] == [1, 1, 2]
    # Final ordering falls back to the identity key
    assert [a.name for a in ranked] == ["jane", "john", "Pat"]


def test_scores_are_finite_and_non_negative_when_everything_ties():
    """All-equal metrics and all-zero weights still give finite scores."""
    authors = _table(*[
        _stats(f"Dev{i}", f"dev{i}@example.com", 1, 1, utc(2020, 1, 1), utc(2020, 1, 1))
        for i in range(5)
    ])

    for weights in (WeightVector(), WeightVector(0, 0, 0, 0), WeightVector(1e6, 0, 3, 0.5)):
        ranked = AttributionScoreCalculator().score(authors, weights, REFERENCE)
        for author in ranked:
            assert math.isfinite(author.score)
            assert author.score >= 0
        assert len({a.rank for a in ranked}) == 5


def test_epoch_timestamps_do_not_divide_by_zero():
    """Authors whose dates all fell back to the epoch score 0 on recency."""
    records = [
        record(1, "c1", "A", "a@example.com", "garbage"),
        record(2, "c2", "B", "b@example.com", None),
    ]

    ranked = AttributionScoreCalculator().score(aggregate(records), WeightVector(), REFERENCE)

    for author in ranked:
        assert author.factors["latest"] == 0.0
        assert math.isfinite(author.score)


def test_ranking_is_deterministic(scenario_records):
    """Identical inputs give identical orders, regardless of mapping order."""
    result = aggregate(scenario_records)
    calculator = AttributionScoreCalculator()

    first = calculator.score(result, WeightVector(), REFERENCE)
    reversed_table = dict(reversed(list(result.authors.items())))
    second = calculator.score(reversed_table, WeightVector(), REFERENCE)

    assert [(a.email, a.rank, a.score) for a in first] == \
        [(a.email, a.rank, a.score) for a in second]


def test_display_score_scale():
    """The configured scale is applied before rounding."""
    calculator = AttributionScoreCalculator(config=ExpertsConfig(score_scale=10))

    assert calculator.display_score(1.26) == 13
    assert calculator.display_score(0.0) == 0
    assert AttributionScoreCalculator().display_score(3.8214) == 382


def test_default_weights_come_from_config(scenario_records):
    """Without explicit weights the configured vector is used."""
    config = ExpertsConfig(weights=WeightVector(0, 1, 0, 0))
    ranked = AttributionScoreCalculator(config=config).score(aggregate(scenario_records), reference_time=REFERENCE)

    assert ranked[0].email == "bob@example.com"
    assert ranked[0].score == 1.0


def test_empty_input():
    assert AttributionScoreCalculator().score({}, WeightVector(), REFERENCE) == []


def test_parse_weights():
    weights = WeightVector.parse("0, 1,2.5,0")

    assert weights == WeightVector(0.0, 1.0, 2.5, 0.0)
    assert weights.total == 3.5
    assert str(weights) == "0,1,2.5,0"


@pytest.mark.parametrize("spec", ["", "1,1,1", "1,1,1,1,1", "1,a,1,1", "1,-1,1,1", "1,inf,1,1", "nan,1,1,1"])
def test_parse_weights_rejects(spec):
    with pytest.raises(InvalidWeightSpec):
        WeightVector.parse(spec)


@pytest.mark.parametrize("weights", [WeightVector(1e307, 0, 0, 0), WeightVector(1e308, 1e308, 0, 0)])
def test_weights_that_overflow_display_score_are_rejected(scenario_records, weights):
    """No weight vector may push a score or its display value to infinity."""
    calculator = AttributionScoreCalculator()

    with pytest.raises(InvalidWeightSpec):
        calculator.score(aggregate(scenario_records), weights, REFERENCE)


def test_overflow_check_uses_configured_scale():
    weights = WeightVector(1e306, 0, 0, 0)

    assert AttributionScoreCalculator().check_weights(weights) is weights
    with pytest.raises(InvalidWeightSpec):
        AttributionScoreCalculator(config=ExpertsConfig(score_scale=1000)).check_weights(weights)


def test_large_finite_weights_keep_the_ranking(scenario_records):
    ranked = AttributionScoreCalculator().score(
        aggregate(scenario_records), WeightVector(1e300, 1e300, 0, 0), REFERENCE
    )

    assert [a.email for a in ranked] == ["alice@example.com", "bob@example.com"]
    assert all(math.isfinite(a.score) for a in ranked)
    assert ranked[0].display_score > ranked[1].display_score > 0
