"""Pydantic schemas for trip endpoints."""

from datetime import date, datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class TripPayload(BaseModel):
    """Body for POST /trips and PUT /trips/{id}. Accepts camelCase keys."""

    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    start_date: Optional[date] = Field(None, validation_alias=AliasChoices("start_date", "startDate"))
    end_date: Optional[date] = Field(None, validation_alias=AliasChoices("end_date", "endDate"))
    is_public: bool = Field(True, validation_alias=AliasChoices("is_public", "isPublic"))
    cover_image_url: Optional[str] = Field(
        None,
        max_length=1024,
        validation_alias=AliasChoices("cover_image_url", "coverImageUrl"),
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Trip name is required")
        return value

    @field_validator("cover_image_url")
    @classmethod
    def validate_cover_image_url(cls, value: Optional[str]) -> Optional[str]:
        value = (value or "").strip() or None
        if value and not value.startswith(("http://", "https://")):
            raise ValueError("cover_image_url must be an http(s) URL")
        return value

    @model_validator(mode="after")
    def validate_date_order(self) -> "TripPayload":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TripSchema(BaseModel):
    """A stored trip."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_public: bool
    cover_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TripResponse(BaseModel):
    """Response wrapping a single trip."""

    trip: TripSchema


class TripsResponse(BaseModel):
    """Response for GET /trips."""

    trips: list[TripSchema]
