"""
Modelo de Post.

Un post es una necesidad (seeker), un espacio ofrecido (landlord)
o una publicación del foro de la comunidad.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from spacematch.models.attributes import PostAttributes


class PostType(str, Enum):
    NEED = "need"
    SPACE = "space"
    COMMUNITY = "community"

    @property
    def opposite(self) -> Optional["PostType"]:
        """Tipo contra el que se matchea (None para community)."""
        if self is PostType.NEED:
            return PostType.SPACE
        if self is PostType.SPACE:
            return PostType.NEED
        return None


class PostStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    DELETED = "deleted"


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Interpreta datetimes naive como UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Post(BaseModel):
    """
    Post tal como se guarda en la tabla `posts`.

    El tipo no cambia después de la creación. La ventana de
    disponibilidad solo tiene sentido en posts de tipo space.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    id: Optional[str] = Field(None, description="ID generado por el store")
    type: PostType
    author_id: str
    author_name: str = ""
    author_photo_url: Optional[str] = Field(None, alias="authorPhotoURL")
    title: str = ""
    description: str = ""
    images: list[str] = Field(default_factory=list)
    attributes: PostAttributes = Field(default_factory=PostAttributes)
    search_keywords: list[str] = Field(default_factory=list)
    status: PostStatus = PostStatus.ACTIVE

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Disponibilidad (solo spaces)
    has_availability: bool = False
    availability_start: Optional[datetime] = None
    availability_end: Optional[datetime] = None

    @field_validator("images", "search_keywords", mode="before")
    @classmethod
    def _null_list(cls, value):
        return value if value is not None else []

    @field_validator("attributes", mode="before")
    @classmethod
    def _null_attributes(cls, value):
        return value if value is not None else {}

    @field_validator("has_availability", mode="before")
    @classmethod
    def _null_flag(cls, value):
        return bool(value)

    @field_validator(
        "created_at", "updated_at", "availability_start", "availability_end"
    )
    @classmethod
    def _utc(cls, value):
        return ensure_utc(value)

    @property
    def is_matchable(self) -> bool:
        return self.type in (PostType.NEED, PostType.SPACE)
