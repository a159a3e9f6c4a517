"""
Request body models.

JSON keys are camelCase (pricePerNight, availabilityText, ...). Integer fields
take JSON numbers with no fractional part: 4 and 4.0 pass, 4.5, "4" and true
are rejected. Unknown keys are ignored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_AMOUNT = 1_000_000


def _json_number(value: Any) -> Any:
    # bool is an int subclass; strings would be coerced by lax int parsing
    if isinstance(value, (bool, str)):
        raise ValueError("Input should be a number")
    return value


Rating = Annotated[int, BeforeValidator(_json_number), Field(ge=1, le=5)]
Amount = Annotated[int, BeforeValidator(_json_number), Field(ge=0, le=MAX_AMOUNT)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImageRef(CamelModel):
    storage_path: str = Field(..., min_length=3, max_length=300)


class CreateListingRequest(CamelModel):
    """POST /listings body."""

    title: str = Field(..., min_length=3, max_length=80)
    area: str = Field(..., min_length=2, max_length=80)
    price_per_night: Amount
    description: str = Field(..., min_length=10, max_length=5000)
    availability_text: str | None = Field(None, max_length=500)
    images: list[ImageRef] | None = None


class CreateRentalRequest(CamelModel):
    """POST /requests body. Dates are ISO-8601, stored in UTC; naive values are taken as UTC."""

    area: str = Field(..., min_length=2, max_length=80)
    date_from: datetime | None = None
    date_to: datetime | None = None
    budget_max: Amount | None = None
    text: str = Field(..., min_length=5, max_length=2000)

    @field_validator("date_from", "date_to")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Ratings(CamelModel):
    overall: Rating
    trust: Rating
    accuracy: Rating
    experience: Rating


class CreateRecommendationRequest(CamelModel):
    """POST /hosts/{hostId}/recommendations body."""

    ratings: Ratings
    text: str | None = Field(None, max_length=500)
