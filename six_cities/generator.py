"""
Synthetic offer generation.

Offers are produced lazily, one TSV line per pull, so large counts never hold
the whole result set in memory.
"""

from __future__ import annotations

import math
import random
from typing import Iterator, List, Optional, Sequence, TypeVar

from .config import settings
from .models import Author, CityCoordinates, Location, MockDataset, Offer

T = TypeVar("T")

# One degree of latitude is roughly 111 km
KM_PER_DEGREE = 111.0

PREMIUM_PROBABILITY = 0.2
PHOTOS_RANGE = (3, 6)
FEATURES_RANGE = (2, 6)
RATING_RANGE = (3.0, 5.0)
ROOMS_RANGE = (1, 5)
GUESTS_RANGE = (1, 10)
PRICE_RANGE = (50, 1000)


def random_items(items: Sequence[T], count: int, rng: random.Random) -> List[T]:
    # Clamped to the source size: never repeats an item within one draw
    return rng.sample(list(items), min(count, len(items)))


def random_location(center: CityCoordinates, rng: random.Random) -> Location:
    """Uniform random point inside the city's radius (polar sampling)."""
    radius_deg = center.radius / KM_PER_DEGREE
    angle = rng.random() * 2 * math.pi
    distance = math.sqrt(rng.random()) * radius_deg
    return Location(
        latitude=round(center.latitude + distance * math.cos(angle), 6),
        longitude=round(center.longitude + distance * math.sin(angle), 6),
    )


def build_offer(dataset: MockDataset, rng: random.Random, pro_user_type: Optional[str] = None) -> Offer:
    pro_user_type = settings.pro_user_type if pro_user_type is None else pro_user_type

    city = rng.choice(dataset.cities)
    location = random_location(dataset.coordinates[city], rng)
    photos = random_items(dataset.preview_images, rng.randint(*PHOTOS_RANGE), rng)
    user = rng.choice(dataset.users)

    return Offer(
        title=rng.choice(dataset.titles),
        description=rng.choice(dataset.descriptions),
        city=city,
        preview_image=rng.choice(dataset.preview_images),
        photos=photos,
        is_premium=rng.random() < PREMIUM_PROBABILITY,
        rating=round(rng.uniform(*RATING_RANGE), 1),
        type=rng.choice(dataset.property_types),
        rooms=rng.randint(*ROOMS_RANGE),
        guests=rng.randint(*GUESTS_RANGE),
        price=rng.randint(*PRICE_RANGE),
        features=random_items(dataset.features, rng.randint(*FEATURES_RANGE), rng),
        author=Author(
            name=user.name,
            email=user.email,
            avatar_url=user.avatar_url,
            is_pro=user.type == pro_user_type,
        ),
        location=location,
    )


def generate_offers(
    dataset: MockDataset,
    count: int,
    rng: Optional[random.Random] = None,
    pro_user_type: Optional[str] = None,
) -> Iterator[str]:
    """Yield exactly ``count`` TSV lines, each built on demand."""
    if count < 0:
        raise ValueError(f"Offer count must be non-negative, got {count}")
    rng = rng or random.Random()
    for _ in range(count):
        yield build_offer(dataset, rng, pro_user_type).to_tsv_row()
