"""Rule-based brand-athlete match scoring"""

from dataclasses import dataclass
from typing import Iterable, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AthleteSignals:
    """The athlete attributes the scorer looks at"""
    major_industries: frozenset = frozenset()
    gpa: Optional[float] = None
    verified: bool = False
    enrollment_verified: bool = False
    sport_verified: bool = False
    scholar_tier: Optional[str] = None
    total_followers: int = 0


@dataclass(frozen=True)
class MatchComputation:
    """Outcome of scoring one athlete against one brand"""
    score: int
    major_match: bool
    industry_match: bool
    values_match: bool = False


class MatchScorer:
    """
    Scores an athlete against a brand on a 0-100 scale

    Every pair starts at a base score and collects bonuses for industry
    overlap, academics, verification, scholar tier and social reach.
    """

    def __init__(self):
        self.base_score = 50
        self.industry_bonus = 30
        self.verified_bonus = 5

        # (threshold, bonus) pairs, highest threshold first
        self.gpa_bonuses = ((3.5, 10), (3.0, 5))
        self.follower_bonuses = ((100_000, 5), (50_000, 3), (10_000, 2))

        self.tier_bonuses = {
            'platinum': 10,
            'gold': 7,
            'silver': 5,
            'bronze': 2,
        }

        self.min_score = 0
        self.max_score = 100

    def score(self, athlete: AthleteSignals, brand_industries: Iterable[str]) -> MatchComputation:
        """
        Compute the match score for one pair

        Args:
            athlete: Athlete signals
            brand_industries: Industry tags attached to the brand

        Returns:
            MatchComputation with the clamped score and match flags
        """
        score = self.base_score

        industry_match = bool(set(brand_industries) & set(athlete.major_industries))
        if industry_match:
            score += self.industry_bonus

        score += self._tiered_bonus(athlete.gpa, self.gpa_bonuses)

        if athlete.verified or (athlete.enrollment_verified and athlete.sport_verified):
            score += self.verified_bonus

        score += self.tier_bonuses.get(_tier_value(athlete.scholar_tier), 0)

        score += self._tiered_bonus(athlete.total_followers or 0, self.follower_bonuses)

        score = max(self.min_score, min(self.max_score, score))

        # Industry overlap is computed through the major category, so both flags move together
        return MatchComputation(
            score=score,
            major_match=industry_match,
            industry_match=industry_match,
        )

    @staticmethod
    def _tiered_bonus(value, tiers) -> int:
        if value is None:
            return 0
        for threshold, bonus in tiers:
            if value >= threshold:
                return bonus
        return 0


def _tier_value(tier) -> Optional[str]:
    # Accept both ScholarTier members and raw strings
    if tier is None:
        return None
    return getattr(tier, "value", tier)
