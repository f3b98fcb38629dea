"""
AggregateScorer — pure algorithmic scorer.
No LLM calls. No DB calls. Reduces a list of ratings to a 0-100 score.

Weights per ingredient:
  safe     100
  caution   60
  avoid     20

score = round_half_up(weighted sum / ingredient count); an empty list scores
100 (no evidence of risk).
"""

from __future__ import annotations

from typing import Iterable

from labelscan.schemas.analysis import RatingSummary, SafetyRating

RATING_WEIGHTS: dict[SafetyRating, int] = {
    SafetyRating.SAFE: 100,
    SafetyRating.CAUTION: 60,
    SafetyRating.AVOID: 20,
}
EMPTY_SCORE = 100


class AggregateScorer:
    @staticmethod
    def tally(ratings: Iterable[SafetyRating]) -> RatingSummary:
        summary = RatingSummary()
        for rating in ratings:
            if rating == SafetyRating.SAFE:
                summary.safe += 1
            elif rating == SafetyRating.CAUTION:
                summary.caution += 1
            else:
                summary.avoid += 1
        return summary

    def score(self, ratings: Iterable[SafetyRating]) -> int:
        return self.score_summary(self.tally(ratings))

    @staticmethod
    def score_summary(summary: RatingSummary) -> int:
        total = summary.total
        if total == 0:
            return EMPTY_SCORE
        weighted = (
            RATING_WEIGHTS[SafetyRating.SAFE] * summary.safe
            + RATING_WEIGHTS[SafetyRating.CAUTION] * summary.caution
            + RATING_WEIGHTS[SafetyRating.AVOID] * summary.avoid
        )
        # Integer half-up rounding; round() would round .5 to even
        return (2 * weighted + total) // (2 * total)
