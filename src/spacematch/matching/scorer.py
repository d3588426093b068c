"""
Scoring de compatibilidad entre un post need y un post space.

Reglas:
- Requisitos hard del seeker (ADA, mascotas, climatización): si el
  espacio no los ofrece, el par queda descartado con score 0.
- Reglas independientes que suman puntos y agregan un label cada una.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from spacematch.models import Post, PostAttributes, PostType
from spacematch.models.post import ensure_utc

# Puntos por regla
SIZE_POINTS = 10
ENVIRONMENT_POINTS = 10
DURATION_POINTS = 15
PRIVACY_POINTS = 10
NOISE_POINTS = 10
UTILITY_POINTS = 2  # por utility en común
USER_TYPE_POINTS = 5  # por tipo de usuario en común
AMENITY_POINTS = 3
LOCATION_POINTS = 20
AVAILABLE_NOW_POINTS = 5
LONG_TERM_POINTS = 5

LONG_TERM_WINDOW = timedelta(days=30)

# (campo, label, puntos)
_SCALAR_RULES = (
    ("size_category", "Size", SIZE_POINTS),
    ("environment", "Environment", ENVIRONMENT_POINTS),
    ("duration", "Duration", DURATION_POINTS),
    ("privacy_level", "Privacy", PRIVACY_POINTS),
    ("noise_level", "Noise Level", NOISE_POINTS),
)

# (campo, label)
_AMENITY_RULES = (
    ("has_parking", "Parking"),
    ("has_restroom", "Restroom"),
    ("ada_accessible", "ADA Accessible"),
    ("pets_allowed", "Pets Allowed"),
    ("climate_controlled", "Climate Control"),
)

# Capacidades que el seeker exige y el espacio debe ofrecer
HARD_REQUIREMENTS = ("ada_accessible", "pets_allowed", "climate_controlled")


@dataclass
class ScoreResult:
    """Resultado del scoring de un par need/space."""

    score: int = 0
    matching_attributes: list[str] = field(default_factory=list)

    def add(self, label: str, points: int) -> None:
        self.score += points
        self.matching_attributes.append(label)


def split_pair(post_a: Post, post_b: Post) -> tuple[Post, Post]:
    """
    Identifica (need_post, space_post) sin importar el orden.

    Raises:
        ValueError: Si no es exactamente un need y un space
    """
    types = {post_a.type, post_b.type}
    if types != {PostType.NEED, PostType.SPACE}:
        raise ValueError(
            f"Scoring requires one need and one space post, got "
            f"{post_a.type.value} and {post_b.type.value}"
        )
    if post_a.type is PostType.NEED:
        return post_a, post_b
    return post_b, post_a


def violates_hard_requirements(need: PostAttributes, space: PostAttributes) -> bool:
    """True si el seeker exige algo que el espacio no ofrece."""
    return any(
        getattr(need, name) is True and getattr(space, name) is not True
        for name in HARD_REQUIREMENTS
    )


def _locations_match(first: Optional[str], second: Optional[str]) -> bool:
    if not first or not second:
        return False
    first, second = first.lower(), second.lower()
    return first == second or first in second or second in first


def score_match(
    post_a: Post,
    post_b: Post,
    now: Optional[datetime] = None,
) -> ScoreResult:
    """
    Calcula el score de compatibilidad entre dos posts.

    Args:
        post_a: Un post need o space
        post_b: El post del tipo opuesto
        now: Momento de referencia para "Available Now" (default: ahora, UTC)

    Returns:
        ScoreResult con score y labels en orden de evaluación
    """
    need_post, space_post = split_pair(post_a, post_b)
    need = need_post.attributes
    space = space_post.attributes
    result = ScoreResult()

    if violates_hard_requirements(need, space):
        return result

    for name, label, points in _SCALAR_RULES:
        mine, theirs = getattr(need, name), getattr(space, name)
        if mine is not None and theirs is not None and mine == theirs:
            result.add(label, points)

    common_utilities = set(need.utilities or ()) & set(space.utilities or ())
    if common_utilities:
        result.add("Utilities", UTILITY_POINTS * len(common_utilities))

    common_user_types = set(need.user_types or ()) & set(space.user_types or ())
    if common_user_types:
        result.add("User Type", USER_TYPE_POINTS * len(common_user_types))

    for name, label in _AMENITY_RULES:
        if getattr(need, name) is True and getattr(space, name) is True:
            result.add(label, AMENITY_POINTS)

    if _locations_match(need.location, space.location):
        result.add("Location", LOCATION_POINTS)

    start = ensure_utc(space_post.availability_start)
    end = ensure_utc(space_post.availability_end)
    if space_post.has_availability and start and end:
        now = ensure_utc(now) if now else datetime.now(timezone.utc)
        if start <= now <= end:
            result.add("Available Now", AVAILABLE_NOW_POINTS)
        if end - start > LONG_TERM_WINDOW:
            result.add("Long-term Availability", LONG_TERM_POINTS)

    return result
