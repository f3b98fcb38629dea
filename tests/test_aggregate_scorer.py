import pytest

from labelscan.schemas.analysis import IngredientAnalysis, RatingSummary, SafetyRating
from labelscan.services.aggregate_scorer import EMPTY_SCORE, AggregateScorer
from labelscan.services.assessment import assess_product, key_findings, overall_assessment, recommendations

SAFE, CAUTION, AVOID = SafetyRating.SAFE, SafetyRating.CAUTION, SafetyRating.AVOID

scorer = AggregateScorer()


# ── AggregateScorer ──────────────────────────────────────────────────────────


def test_empty_list_scores_100():
    assert scorer.score([]) == EMPTY_SCORE == 100


@pytest.mark.parametrize(
    "ratings, expected",
    [
        ([SAFE], 100),
        ([CAUTION], 60),
        ([AVOID], 20),
        ([SAFE, CAUTION], 80),
        ([SAFE, SAFE, AVOID], 73),        # 73.33
        ([SAFE, CAUTION, CAUTION], 73),   # 73.33
        ([SAFE, AVOID, AVOID, AVOID], 40),
        ([CAUTION, CAUTION, CAUTION, AVOID, AVOID, AVOID, AVOID, AVOID], 35),  # 35.0
        ([SAFE, SAFE, CAUTION], 87),      # 86.67
        ([CAUTION] + [AVOID] * 15, 23),   # 22.5 rounds up
    ],
)
def test_score(ratings, expected):
    assert scorer.score(ratings) == expected


def test_score_stays_in_range_and_is_monotonic():
    ratings = [SAFE] * 5
    previous = scorer.score(ratings)
    for index in range(5):
        ratings[index] = CAUTION
        current = scorer.score(ratings)
        assert 0 <= current <= previous <= 100
        previous = current
    for index in range(5):
        ratings[index] = AVOID
        current = scorer.score(ratings)
        assert 0 <= current <= previous
        previous = current


def test_tally_counts_add_up():
    summary = scorer.tally([SAFE, AVOID, CAUTION, SAFE])
    assert summary == RatingSummary(safe=2, caution=1, avoid=1)
    assert summary.total == 4


# ── Assessment ───────────────────────────────────────────────────────────────


def _item(name, rating, concerns=(), alternatives=()):
    return IngredientAnalysis(
        name=name, position=1, rating=rating, confidence=80, explanation="",
        health_concerns=list(concerns), alternatives=list(alternatives),
    )


def test_overall_assessment_variants():
    assert overall_assessment([]) == "No ingredients were recognized on this label."
    assert overall_assessment([_item("A", AVOID)]).startswith(
        "This product contains 1 ingredient that should be avoided."
    )
    assert "2 ingredients" in overall_assessment([_item("A", AVOID), _item("B", AVOID)])
    assert "several ingredients that warrant caution" in overall_assessment(
        [_item("A", CAUTION), _item("B", CAUTION), _item("C", SAFE)]
    )
    assert "clean ingredient profile" in overall_assessment([_item("A", SAFE)])
    assert "mixed ingredient profile" in overall_assessment([_item("A", CAUTION), _item("B", SAFE)])


def test_key_findings():
    items = [
        _item("Red 40", AVOID, concerns=["Hyperactivity", "Allergic reactions"]),
        _item("Yellow 5", AVOID, concerns=["Hyperactivity"]),
        _item("Sugar", CAUTION, concerns=["Weight gain"]),
        _item("Water", SAFE),
    ]
    assert key_findings(items) == [
        "Contains 2 ingredients to avoid: Red 40, Yellow 5",
        "1 ingredient requires caution: Sugar",
        "Common health concerns: Hyperactivity",
    ]
    assert key_findings([_item("Water", SAFE)]) == []


def test_recommendations():
    items = [
        _item("Red 40", AVOID, alternatives=["Beet juice", "Paprika"]),
        _item("Sugar", CAUTION, alternatives=["Stevia", "Paprika", "Monk fruit"]),
    ]
    result = recommendations(items)
    assert result[0].startswith("Look for products without artificial colors")
    assert result[1] == "Consider products with: Beet juice, Paprika, Stevia"
    assert len(result) == 4

    assert len(recommendations([_item("Water", SAFE)])) == 2


def test_assess_product():
    assessment = assess_product([_item("Water", SAFE)])
    assert "clean ingredient profile" in assessment.overall_assessment
    assert assessment.key_findings == []
    assert len(assessment.recommendations) == 2
