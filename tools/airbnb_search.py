# Airbnb Search Tool (mock data)

import logging
from typing import Dict, Any, List

from utils.time_util import utc_timestamp

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Unknown Location"
DEFAULT_GUESTS = 2
DEFAULT_AVAILABILITY = "Available"

# 固定リスティング（location 等は検索パラメータで埋める）
_LISTING_TEMPLATES = [
    {
        "id": "mcp-1",
        "name": "Luxury Villa in {location}",
        "price": "$250/night",
        "rating": "4.9 (156 reviews)",
        "amenities": ["WiFi", "Pool", "Kitchen", "Parking", "Ocean View"],
        "host": "Sarah Johnson",
    },
    {
        "id": "mcp-2",
        "name": "Cozy Apartment in {location}",
        "price": "$120/night",
        "rating": "4.7 (89 reviews)",
        "amenities": ["WiFi", "Kitchen", "AC", "Workspace"],
        "host": "Mike Chen",
    },
    {
        "id": "mcp-3",
        "name": "Modern Studio in {location}",
        "price": "$89/night",
        "rating": "4.6 (234 reviews)",
        "amenities": ["WiFi", "Gym", "Rooftop", "Pet-friendly"],
        "host": "Emma Rodriguez",
    },
]


def _build_listings(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    location = params.get("location") or DEFAULT_LOCATION
    listings = []
    for template in _LISTING_TEMPLATES:
        listings.append({
            "id": template["id"],
            "name": template["name"].format(location=location),
            "price": template["price"],
            "rating": template["rating"],
            "location": location,
            "url": f"https://airbnb.com/rooms/{template['id']}",
            "amenities": list(template["amenities"]),
            "host": template["host"],
            "guests": params.get("adults") or DEFAULT_GUESTS,
            "checkin": params.get("checkin") or DEFAULT_AVAILABILITY,
            "checkout": params.get("checkout") or DEFAULT_AVAILABILITY,
        })
    return listings


def search_listings(params: Dict[str, Any]) -> Dict[str, Any]:
    """モック検索結果を返す（入力検証なし・常に成功）"""
    listings = _build_listings(params)
    logger.debug(f"[search_listings] {len(listings)} listings for {params.get('location')!r}")
    return {
        "success": True,
        "searchParams": params,
        "totalResults": len(listings),
        "listings": listings,
        "timestamp": utc_timestamp(),
    }
