# Airbnb Listing Details Tool (mock data)

import copy
from typing import Dict, Any

from utils.time_util import utc_timestamp

_LISTING_DETAIL = {
    "name": "Beautiful Oceanfront Villa",
    "description": (
        "Stunning 3-bedroom villa with panoramic ocean views, private pool, and direct "
        "beach access. Perfect for families or groups looking for a luxurious getaway."
    ),
    "price": "$250/night",
    "rating": "4.9 (156 reviews)",
    "location": "Oceanfront, Paradise Bay",
    "coordinates": {"lat": 25.7617, "lng": -80.1918},
    "amenities": [
        "Private Pool", "Ocean View", "Beach Access", "WiFi",
        "Full Kitchen", "Parking", "Air Conditioning", "Washer/Dryer",
    ],
    "host": {
        "name": "Sarah Johnson",
        "rating": "4.95",
        "responseRate": "100%",
        "responseTime": "within an hour",
        "verified": True,
        "joinedDate": "2018",
    },
    "capacity": {"maxGuests": 8, "bedrooms": 3, "bathrooms": 2, "beds": 4},
    "policies": {
        "checkIn": "3:00 PM",
        "checkOut": "11:00 AM",
        "cancellation": "Flexible",
        "smoking": False,
        "pets": True,
        "parties": False,
    },
    "pricing": {
        "basePrice": 250,
        "cleaningFee": 75,
        "serviceFee": 42,
        "taxes": 28,
        "total": 395,
    },
    "images": [
        "https://via.placeholder.com/800x600/4A90E2/FFFFFF?text=Ocean+View",
        "https://via.placeholder.com/800x600/7ED321/FFFFFF?text=Pool+Area",
        "https://via.placeholder.com/800x600/F5A623/FFFFFF?text=Interior",
    ],
    "reviews": {
        "overall": 4.9,
        "cleanliness": 4.9,
        "accuracy": 4.8,
        "communication": 5.0,
        "location": 4.9,
        "checkIn": 4.8,
        "value": 4.7,
    },
}


def get_listing_details(listing_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
    """リスティング詳細（固定データ、id と日付のみ差し替え）"""
    listing = {"id": listing_id, **copy.deepcopy(_LISTING_DETAIL)}
    listing["availability"] = {
        "checkin": params.get("checkin") or "Available",
        "checkout": params.get("checkout") or "Available",
        "minimumStay": 2,
        "instantBook": True,
    }
    return {
        "success": True,
        "listing": listing,
        "searchParams": params,
        "timestamp": utc_timestamp(),
    }
