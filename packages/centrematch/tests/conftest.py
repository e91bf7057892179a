"""Shared fixtures: a small snapshot of real-looking shopping centres."""

import pytest

from centrematch.records import build_entries


@pytest.fixture
def centre_rows():
    return [
        {
            "id": 1, "name": "Eastgate Bondi Junction", "slug": "eastgate-bondi-junction",
            "suburb": "Bondi Junction", "city": "Sydney", "state": "NSW", "postcode": "2022",
            "latitude": "-33.8915", "longitude": "151.2477",
        },
        {
            "id": 2, "name": "Westfield Parramatta", "slug": "westfield-parramatta",
            "suburb": "Parramatta", "city": "Sydney", "state": "NSW", "postcode": "2150",
            "latitude": "-33.8175", "longitude": "151.0019",
        },
        {
            "id": 3, "name": "Campbelltown Mall", "slug": "campbelltown-mall",
            "suburb": "Campbelltown", "city": "Sydney", "state": "NSW", "postcode": "2560",
            "latitude": "-34.0650", "longitude": "150.8142",
        },
        {
            "id": 4, "name": "Erina Fair", "slug": "erina-fair",
            "suburb": "Erina", "city": "Central Coast", "state": "NSW", "postcode": "2250",
            "latitude": "-33.4366", "longitude": "151.3900",
        },
        {
            "id": 5, "name": "Chermside Centre", "slug": "chermside-centre",
            "suburb": "Chermside", "city": "Brisbane", "state": "QLD", "postcode": "4032",
            "latitude": "-27.3858", "longitude": "153.0307",
        },
        {
            "id": 6, "name": "Pacific Square", "slug": "pacific-square",
            "suburb": "Maroubra", "city": "Sydney", "state": "NSW", "postcode": "2035",
            "latitude": None, "longitude": None,
        },
        {
            "id": 7, "name": "Highpoint", "slug": "highpoint",
            "suburb": "Maribyrnong", "city": "Melbourne", "state": "VIC", "postcode": "3032",
            "latitude": "-37.7737", "longitude": "144.8880",
        },
    ]


@pytest.fixture
def entries(centre_rows):
    return list(build_entries(centre_rows))
