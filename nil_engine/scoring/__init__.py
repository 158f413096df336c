"""Match scoring"""

from nil_engine.scoring.match_scorer import AthleteSignals, MatchComputation, MatchScorer

__all__ = [
    'AthleteSignals',
    'MatchComputation',
    'MatchScorer',
]
