# Airbnb REST API (mock data)

import logging
import re
from typing import Dict, Any, Optional

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from tools.airbnb_search import search_listings
from tools.listing_details import get_listing_details
from utils.time_util import utc_timestamp

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["rest"])

SOURCE_TAG = "mock-data"

# 先頭の整数部分のみ（"12px" -> 12, "1e3" -> 1）
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def coerce_int(value: Any) -> Optional[int]:
    """整数化: "2" -> 2, "2.7" -> 2, 変換不可 -> None"""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def coerce_price(value: Any) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _guest_counts(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "adults": coerce_int(payload.get("adults", 1)),
        "children": coerce_int(payload.get("children", 0)),
        "infants": coerce_int(payload.get("infants", 0)),
        "pets": coerce_int(payload.get("pets", 0)),
    }


def _drop_unset(params: Dict[str, Any], optional_keys) -> Dict[str, Any]:
    return {
        key: value for key, value in params.items()
        if not (key in optional_keys and value is None)
    }


@router.post("/search")
async def search(payload: Optional[Dict[str, Any]] = Body(default=None)):
    """Airbnb リスティング検索"""
    payload = payload or {}
    try:
        location = payload.get("location")
        if not location:
            return JSONResponse(status_code=400, content={
                "error": "Location is required",
                "example": {"location": "New York, NY"},
            })

        search_params = _drop_unset({
            "location": location,
            "checkin": payload.get("checkin"),
            "checkout": payload.get("checkout"),
            **_guest_counts(payload),
            "minPrice": coerce_price(payload.get("minPrice")),
            "maxPrice": coerce_price(payload.get("maxPrice")),
            "placeId": payload.get("placeId"),
        }, ("checkin", "checkout", "minPrice", "maxPrice", "placeId"))

        result = search_listings(search_params)
        return {**result, "timestamp": utc_timestamp(), "source": SOURCE_TAG}

    except Exception as e:
        logger.exception(f"[REST] Search error: {e}")
        return JSONResponse(status_code=500, content={
            "error": "Search failed",
            "message": str(e),
            "timestamp": utc_timestamp(),
        })


def _listing_id_required() -> JSONResponse:
    return JSONResponse(status_code=400, content={
        "error": "Listing ID is required",
        "timestamp": utc_timestamp(),
    })


@router.post("/listing/")
async def listing_without_id():
    return _listing_id_required()


@router.post("/listing/{listing_id}")
async def listing_details(listing_id: str, payload: Optional[Dict[str, Any]] = Body(default=None)):
    """リスティング詳細取得"""
    payload = payload or {}
    try:
        if not listing_id.strip():
            return _listing_id_required()

        search_params = _drop_unset({
            "id": listing_id,
            "checkin": payload.get("checkin"),
            "checkout": payload.get("checkout"),
            **_guest_counts(payload),
        }, ("checkin", "checkout"))

        result = get_listing_details(listing_id, search_params)
        return {**result, "timestamp": utc_timestamp(), "source": SOURCE_TAG}

    except Exception as e:
        logger.exception(f"[REST] Listing details error: {e}")
        return JSONResponse(status_code=500, content={
            "error": "Failed to fetch listing details",
            "message": str(e),
            "timestamp": utc_timestamp(),
        })
