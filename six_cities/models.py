from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Fixed column order of the TSV wire format
OFFER_COLUMNS: List[str] = [
    "title",
    "description",
    "city",
    "previewImage",
    "photos",
    "isPremium",
    "rating",
    "type",
    "rooms",
    "guests",
    "price",
    "features",
    "authorName",
    "authorEmail",
    "authorAvatar",
    "authorIsPro",
    "latitude",
    "longitude",
]

LIST_SEPARATOR = ";"

# Characters that would break a TSV row apart
ROW_BREAKING_CHARS = ("\t", "\n", "\r")


class OfferType(str, Enum):
    apartment = "apartment"
    house = "house"
    room = "room"
    hotel = "hotel"


class MockUser(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    email: str
    avatar_url: str = Field(..., alias="avatarUrl")
    type: str

    @field_validator("name", "email", "avatar_url")
    @classmethod
    def _check_tsv_safe(cls, value: str) -> str:
        return _ensure_tsv_safe(value)


class CityCoordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    radius: float = Field(..., ge=0, description="Radius around the city center in kilometres")


class MockDataset(BaseModel):
    """Randomization sources fetched from the mock data server."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    titles: List[str] = Field(..., min_length=1)
    descriptions: List[str] = Field(..., min_length=1)
    cities: List[str] = Field(..., min_length=1)
    preview_images: List[str] = Field(..., alias="previewImages", min_length=1)
    property_types: List[OfferType] = Field(..., alias="propertyTypes", min_length=1)
    features: List[str] = Field(..., min_length=1)
    users: List[MockUser] = Field(..., min_length=1)
    coordinates: Dict[str, CityCoordinates]

    @field_validator("titles", "descriptions", "cities", "preview_images", "features")
    @classmethod
    def _check_tsv_safe(cls, values: List[str]) -> List[str]:
        for value in values:
            _ensure_tsv_safe(value)
        return values

    @model_validator(mode="after")
    def _check_city_coordinates(self) -> "MockDataset":
        missing = [city for city in self.cities if city not in self.coordinates]
        if missing:
            raise ValueError(f"Missing coordinates for cities: {', '.join(missing)}")
        return self


class Author(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    email: str
    avatar_url: str = Field(..., alias="avatarUrl")
    is_pro: bool = Field(..., alias="isPro")


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Offer(BaseModel):
    """A single rental offer, either synthesized or parsed from a TSV row."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    description: str
    city: str
    preview_image: str = Field(..., alias="previewImage")
    photos: List[str] = []
    is_premium: bool = Field(..., alias="isPremium")
    rating: float = Field(..., ge=3.0, le=5.0)
    type: OfferType
    rooms: int = Field(..., ge=1, le=5)
    guests: int = Field(..., ge=1, le=10)
    price: int = Field(..., ge=50, le=1000)
    features: List[str] = []
    author: Author
    location: Location

    def to_tsv_fields(self) -> List[str]:
        return [
            self.title,
            self.description,
            self.city,
            self.preview_image,
            LIST_SEPARATOR.join(self.photos),
            _format_bool(self.is_premium),
            f"{self.rating:.1f}",
            self.type.value,
            str(self.rooms),
            str(self.guests),
            str(self.price),
            LIST_SEPARATOR.join(self.features),
            self.author.name,
            self.author.email,
            self.author.avatar_url,
            _format_bool(self.author.is_pro),
            f"{self.location.latitude:.6f}",
            f"{self.location.longitude:.6f}",
        ]

    def to_tsv_row(self) -> str:
        """Render the offer as one newline-terminated TSV line."""
        return "\t".join(self.to_tsv_fields()) + "\n"

    @classmethod
    def from_record(cls, record: Dict[str, str]) -> "Offer":
        """Build a typed offer from a column-name -> raw string mapping.

        Raises ``ValueError`` (pydantic ``ValidationError`` included) when a
        value cannot be converted or is out of range.
        """
        return cls.model_validate(
            {
                "title": record["title"],
                "description": record["description"],
                "city": record["city"],
                "previewImage": record["previewImage"],
                "photos": _split_list(record["photos"]),
                "isPremium": _parse_bool(record["isPremium"]),
                "rating": record["rating"],
                "type": record["type"],
                "rooms": record["rooms"],
                "guests": record["guests"],
                "price": record["price"],
                "features": _split_list(record["features"]),
                "author": {
                    "name": record["authorName"],
                    "email": record["authorEmail"],
                    "avatarUrl": record["authorAvatar"],
                    "isPro": _parse_bool(record["authorIsPro"]),
                },
                "location": {
                    "latitude": record["latitude"],
                    "longitude": record["longitude"],
                },
            }
        )


def _ensure_tsv_safe(value: str) -> str:
    if any(char in value for char in ROW_BREAKING_CHARS):
        raise ValueError(f"Value contains a tab or line break: {value!r}")
    return value


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _parse_bool(value: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"Expected 'true' or 'false', got {value!r}")


def _split_list(value: str) -> List[str]:
    return [item for item in value.split(LIST_SEPARATOR) if item]
