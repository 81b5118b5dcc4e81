"""Pydantic schemas for the check-in endpoint."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CheckinRequest(BaseModel):
    """Claimed position plus optional note and image reference."""

    latitude: float
    longitude: float
    message: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(
        None,
        max_length=1024,
        validation_alias=AliasChoices("image_url", "imageUrl"),
    )

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.strip().startswith(("http://", "https://")):
            raise ValueError("image_url must be an http(s) URL")
        return value


class MissionProgress(BaseModel):
    """Mission snapshot after a check-in."""

    id: int
    progress: int
    target: int
    completed: bool


class CheckinResponse(BaseModel):
    """Check-in outcome. Serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    accepted: bool
    reason: Optional[str] = None
    points: Optional[int] = None
    points_awarded: Optional[int] = None
    streak_days: Optional[int] = None
    new_achievements: Optional[list[str]] = None
    missions: Optional[list[MissionProgress]] = None
    level: Optional[int] = None
    level_title: Optional[str] = None
    distance_m: Optional[float] = None
