from pydantic import BaseModel, Field, field_validator

from src.core.schemas import MAX_TRIP_DAYS


class ItineraryRequest(BaseModel):
    """Request payload used to generate a new itinerary."""

    city: str = Field(min_length=1, description="Destination city, e.g. 'Lisbon'")
    days: int = Field(ge=1, le=MAX_TRIP_DAYS, description="Requested trip length in days")

    @field_validator("city")
    @classmethod
    def _strip_city(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("city must not be blank")
        return stripped


class ChatRequest(BaseModel):
    """A free-text question for the travel assistant."""

    text: str = Field(min_length=1, description="User message")

    @field_validator("text")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be blank")
        return value


class ChatResponse(BaseModel):
    reply: str


class MapsConfig(BaseModel):
    """Map credentials handed to the browser client."""

    auth_type: str = "api_key"
    google_maps_api_key: str = ""
    google_maps_client_id: str = ""
    client_secret_configured: bool = False
