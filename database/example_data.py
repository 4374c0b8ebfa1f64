"""Example communities and listings used to seed an empty local store."""
from typing import List

from database.models import CommunityModel, ListingModel


EXAMPLE_COMMUNITIES: List[dict] = [
    {
        "id": "riverstone",
        "name": "Riverstone",
        "description": (
            "A master-planned community featuring beautiful homes, top-rated "
            "schools, and resort-style amenities."
        ),
        "location": "Sugar Land, TX",
        "priceRange": "$400K - $800K",
        "image": "/images/communities/riverstone.jpg",
        "amenities": [
            "Swimming Pool", "Tennis Courts", "Playground",
            "Walking Trails", "Clubhouse", "Golf Course",
        ],
        "builders": [
            {"name": "Lennar", "description": "Quality homes with innovative designs", "contact": "(281) 555-0123"},
            {"name": "KB Home", "description": "Personalized homebuilding experience", "contact": "(281) 555-0124"},
        ],
        "homes": [
            {"name": "The Madison", "sqft": 2500, "bedrooms": 4, "bathrooms": 3, "price": 450000},
            {"name": "The Oakwood", "sqft": 3200, "bedrooms": 5, "bathrooms": 4, "price": 650000},
        ],
        "theme": {"primaryColor": "#34C759", "borderRadius": "16px", "borderRadiusLarge": "24px"},
        "sections": {
            "hero": {
                "visible": True,
                "title": "Welcome to Riverstone",
                "subtitle": "Your dream home awaits in this premier Sugar Land community",
            },
            "about": {
                "visible": True,
                "content": (
                    "Riverstone offers the perfect blend of luxury living and "
                    "family-friendly amenities."
                ),
            },
            "homes": {"visible": True, "title": "Available Home Models"},
            "builders": {"visible": True, "title": "Featured Builders"},
        },
    },
    {
        "id": "brookewater",
        "name": "Brookewater",
        "description": (
            "An 850-acre master-planned community in Rosenberg, TX, with lakes, "
            "parks, and top builders."
        ),
        "location": "Rosenberg, TX",
        "priceRange": "$300K - $600K+",
        "image": "/images/communities/brookewater.jpg",
        "amenities": ["Resort-Style Pool", "Water Amenity", "Parks", "Lakes", "Open Space"],
        "builders": [
            {"name": "Chesmar Homes", "description": "Texas-based builder", "contact": "(832) 555-0101"},
        ],
        "homes": [
            {"name": "Premier - Beech", "sqft": 1610, "bedrooms": 3, "bathrooms": 2, "price": 309990},
            {"name": "Premier - Palm", "sqft": 1970, "bedrooms": 4, "bathrooms": 3, "price": 332990},
        ],
        "theme": {"primaryColor": "#007AFF", "borderRadius": "12px", "borderRadiusLarge": "16px"},
        "schools": ["Lamar CISD"],
    },
]

EXAMPLE_LISTINGS: List[dict] = [
    {
        "id": "listing-1",
        "title": "Stunning 4BR Home in Riverstone",
        "description": (
            "Single-family home with an open floor plan, gourmet kitchen and "
            "private backyard."
        ),
        "price": 485000,
        "address": "1234 Riverstone Pkwy, Sugar Land, TX 77479",
        "bedrooms": 4,
        "bathrooms": 3,
        "sqft": 2650,
        "communityId": "riverstone",
        "type": "house",
        "status": "available",
    },
    {
        "id": "listing-2",
        "title": "Luxury 5BR Estate Home",
        "description": "Two-story home with premium finishes, game room and covered patio.",
        "price": 675000,
        "address": "5678 Riverstone Blvd, Sugar Land, TX 77479",
        "bedrooms": 5,
        "bathrooms": 4,
        "sqft": 3450,
        "communityId": "riverstone",
        "type": "house",
        "status": "available",
    },
    {
        "id": "listing-3",
        "title": "Modern 3BR Townhome",
        "description": "Contemporary townhome with high ceilings and a rooftop terrace.",
        "price": 425000,
        "address": "9012 Riverstone Way, Sugar Land, TX 77479",
        "bedrooms": 3,
        "bathrooms": 2.5,
        "sqft": 2100,
        "communityId": "riverstone",
        "type": "townhome",
        "status": "available",
    },
]


def example_communities() -> List[CommunityModel]:
    """Fresh example community models."""
    return [CommunityModel.model_validate(data) for data in EXAMPLE_COMMUNITIES]


def example_listings() -> List[ListingModel]:
    """Fresh example listing models."""
    return [ListingModel.model_validate(data) for data in EXAMPLE_LISTINGS]


__all__ = [
    "EXAMPLE_COMMUNITIES",
    "EXAMPLE_LISTINGS",
    "example_communities",
    "example_listings",
]
