"""
Modelos de datos del sistema.

- Vocabulario de atributos de espacios y necesidades
- Posts (need / space / community)
- Matches y candidatos
"""

from spacematch.models.attributes import (
    Budget,
    Duration,
    Environment,
    NoiseLevel,
    PostAttributes,
    PrivacyLevel,
    SizeCategory,
    UserType,
    Utility,
)
from spacematch.models.post import Post, PostStatus, PostType
from spacematch.models.match import (
    EnrichedMatch,
    Match,
    MatchCandidate,
    MatchStatus,
)

__all__ = [
    # Atributos
    "Budget",
    "Duration",
    "Environment",
    "NoiseLevel",
    "PostAttributes",
    "PrivacyLevel",
    "SizeCategory",
    "UserType",
    "Utility",
    # Posts
    "Post",
    "PostStatus",
    "PostType",
    # Matches
    "EnrichedMatch",
    "Match",
    "MatchCandidate",
    "MatchStatus",
]
