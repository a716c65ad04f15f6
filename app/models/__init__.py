"""
Database Models
"""

from app.models.participant import Participant
from app.models.matching_night import MatchingNight
from app.models.matchbox import Matchbox
from app.models.penalty import Penalty
from app.models.broadcast_note import BroadcastNote
from app.models.probability_cache import ProbabilityCache
from app.models.meta import Meta

__all__ = [
    "Participant",
    "MatchingNight",
    "Matchbox",
    "Penalty",
    "BroadcastNote",
    "ProbabilityCache",
    "Meta",
]
