"""
Motor de matching.

Scoring por reglas, búsqueda de candidatos, registro de matches
y estado local de matches vistos.
"""

from spacematch.matching.scorer import ScoreResult, score_match
from spacematch.matching.engine import MatchFinder
from spacematch.matching.recorder import MatchEnricher, MatchRecorder
from spacematch.matching.notifications import MatchNotifications, SeenMatchStore

__all__ = [
    "MatchEnricher",
    "MatchFinder",
    "MatchNotifications",
    "MatchRecorder",
    "ScoreResult",
    "SeenMatchStore",
    "score_match",
]
