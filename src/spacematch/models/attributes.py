"""
Vocabulario de atributos de espacios y necesidades.

Los valores de cada enum son los strings que viajan en los documentos
del store y en la API.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SizeCategory(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra-large"


class Environment(str, Enum):
    INDOOR = "indoor"
    OUTDOOR = "outdoor"
    MIXED = "mixed"


class Utility(str, Enum):
    ELECTRICITY = "electricity"
    WATER = "water"
    WIFI = "wifi"
    HVAC = "hvac"
    GAS = "gas"


class Duration(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    LONG_TERM = "long-term"


class PrivacyLevel(str, Enum):
    PRIVATE = "private"
    SEMI_PRIVATE = "semi-private"
    SHARED = "shared"


class NoiseLevel(str, Enum):
    QUIET = "quiet"
    MODERATE = "moderate"
    LOUD = "loud"


class UserType(str, Enum):
    ARTIST = "artist"
    MUSICIAN = "musician"
    MAKER = "maker"
    PHOTOGRAPHER = "photographer"
    CRAFTSPERSON = "craftsperson"
    EDUCATOR = "educator"
    ENTREPRENEUR = "entrepreneur"
    OTHER = "other"


# Labels para mostrar en la UI
SIZE_LABELS = {
    SizeCategory.SMALL: "Small",  # < 200 sq ft
    SizeCategory.MEDIUM: "Medium",  # 200-500 sq ft
    SizeCategory.LARGE: "Large",  # 500-1000 sq ft
    SizeCategory.EXTRA_LARGE: "Extra Large",  # 1000+ sq ft
}

ENVIRONMENT_LABELS = {
    Environment.INDOOR: "Indoor",
    Environment.OUTDOOR: "Outdoor",
    Environment.MIXED: "Indoor/Outdoor",
}

UTILITY_LABELS = {
    Utility.ELECTRICITY: "Electricity",
    Utility.WATER: "Water",
    Utility.WIFI: "WiFi",
    Utility.HVAC: "HVAC",
    Utility.GAS: "Gas",
}

DURATION_LABELS = {
    Duration.HOURLY: "Hourly",
    Duration.DAILY: "Daily",
    Duration.WEEKLY: "Weekly",
    Duration.MONTHLY: "Monthly",
    Duration.LONG_TERM: "Long-term",
}

PRIVACY_LABELS = {
    PrivacyLevel.PRIVATE: "Private",
    PrivacyLevel.SEMI_PRIVATE: "Semi-Private",
    PrivacyLevel.SHARED: "Shared",
}

NOISE_LABELS = {
    NoiseLevel.QUIET: "Quiet",
    NoiseLevel.MODERATE: "Moderate",
    NoiseLevel.LOUD: "Loud OK",
}

USER_TYPE_LABELS = {
    UserType.ARTIST: "Artist",
    UserType.MUSICIAN: "Musician",
    UserType.MAKER: "Maker",
    UserType.PHOTOGRAPHER: "Photographer",
    UserType.CRAFTSPERSON: "Craftsperson",
    UserType.EDUCATOR: "Educator",
    UserType.ENTREPRENEUR: "Entrepreneur",
    UserType.OTHER: "Other",
}


class Budget(BaseModel):
    """Rango de presupuesto por período."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    period: Duration


class PostAttributes(BaseModel):
    """
    Atributos estructurados de un post.

    Todos los campos son opcionales: ausencia significa "sin preferencia"
    o "sin dato", nunca False.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    size_category: Optional[SizeCategory] = None
    environment: Optional[Environment] = None
    utilities: Optional[list[Utility]] = None
    budget: Optional[Budget] = None
    duration: Optional[Duration] = None
    location: Optional[str] = None
    has_parking: Optional[bool] = None
    privacy_level: Optional[PrivacyLevel] = None
    has_restroom: Optional[bool] = None
    ada_accessible: Optional[bool] = None
    pets_allowed: Optional[bool] = None
    climate_controlled: Optional[bool] = None
    noise_level: Optional[NoiseLevel] = None
    user_types: Optional[list[UserType]] = None
    custom_tags: Optional[list[str]] = None

    @field_validator(
        "size_category",
        "environment",
        "duration",
        "privacy_level",
        "noise_level",
        "location",
        mode="before",
    )
    @classmethod
    def _empty_as_missing(cls, value):
        # Los formularios guardan "" cuando el campo queda sin elegir
        if value == "":
            return None
        return value
