# crossarb/services/opportunity_scorer.py

"""Weighted desirability score and ranking for arbitrage opportunities."""

import logging
from collections.abc import Mapping
from dataclasses import replace

from crossarb.config.fee_tables import PLATFORM_RELIABILITY
from crossarb.config.settings import Settings
from crossarb.models.listing import Platform
from crossarb.models.opportunity import ArbitrageOpportunity, ScoringWeights
from crossarb.pricing.rounding import round_money

logger = logging.getLogger("crossarb.scorer")


def _unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class OpportunityScorer:
    """Blend margin, absolute profit and platform reliability into [0, 1]."""

    def __init__(
        self,
        reliability: Mapping[Platform, float] = PLATFORM_RELIABILITY,
        weights: ScoringWeights | None = None,
        default_reliability: float = Settings.DEFAULT_RELIABILITY,
    ) -> None:
        self.reliability = reliability
        self.weights = weights or ScoringWeights()
        self.default_reliability = default_reliability

    def reliability_of(self, platform: Platform | str) -> float:
        """Reliability constant for *platform*, 0.5 when unconfigured."""
        try:
            key = Platform(platform)
        except ValueError:
            return self.default_reliability
        return self.reliability.get(key, self.default_reliability)

    def score(
        self,
        opportunity: ArbitrageOpportunity,
        weights: ScoringWeights | None = None,
    ) -> float:
        """Score one opportunity, rounded to 2 decimals."""
        w = weights or self.weights

        margin_score = _unit(opportunity.margin_pct / Settings.MARGIN_SCORE_CAP)
        profit_score = _unit(
            opportunity.estimated_profit / Settings.PROFIT_SCORE_CAP
        )
        reliability_score = (
            self.reliability_of(opportunity.buy_platform)
            + self.reliability_of(opportunity.sell_platform)
        ) / 2

        score = (
            margin_score * w.margin
            + profit_score * w.profit
            + reliability_score * w.reliability
        )
        return round_money(score)

    def rank(
        self,
        opportunities: list[ArbitrageOpportunity],
        weights: ScoringWeights | None = None,
    ) -> list[ArbitrageOpportunity]:
        """Return scored copies sorted by score, best first.

        The sort is stable: opportunities with equal scores keep their
        input order.
        """
        scored = [
            replace(opp, score=self.score(opp, weights))
            for opp in opportunities
        ]
        ranked = sorted(scored, key=lambda o: o.score, reverse=True)
        logger.debug("Ranked %d opportunities", len(ranked))
        return ranked
