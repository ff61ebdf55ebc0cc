# distance.py
"""
Distance from the warehouse to a delivery address.

Uses the Google Distance Matrix API (road distance) when GOOGLE_MAPS_API_KEY
is set, otherwise OpenStreetMap Nominatim geocoding plus the Haversine
formula (straight-line distance).
"""
import logging
import math
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

import requests

import tuning_knobs as knobs
from errors import DistanceLookupError
from quote_models import Address

logger = logging.getLogger(__name__)

# ----------------------------
# Env
# ----------------------------
GOOGLE_MAPS_API_KEY = (os.environ.get("GOOGLE_MAPS_API_KEY") or "").strip()
NOMINATIM_USER_AGENT = os.environ.get("NOMINATIM_USER_AGENT", "decoration-pricing-engine/1.0")
DISTANCE_TIMEOUT_SECONDS = int(os.environ.get("DISTANCE_TIMEOUT_SECONDS", "15"))

GOOGLE_DISTANCE_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"

EARTH_RADIUS_KM = 6371.0

COUNTRIES = {
    "BE": "Belgique",
    "FR": "France",
    "GB": "UK",
    "ES": "Espagne",
    "NL": "Pays-Bas",
    "DE": "Allemagne",
    "CH": "Suisse",
    "LU": "Luxembourg",
}

WAREHOUSE = Address(**knobs.WAREHOUSE_ADDRESS)


@dataclass(frozen=True)
class DistanceResult:
    distance_km: Decimal
    method: str  # "google" or "haversine"


def country_code(country: str) -> str:
    if len(country) == 2 and country.isalpha():
        return country.upper()
    for code, name in COUNTRIES.items():
        if name.lower() == country.lower():
            return code
    return country.upper()


def format_address(address: Address) -> str:
    return f"{address.street}, {address.postal_code} {address.city}, {country_code(address.country)}".strip()


def haversine_km(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def _round_km(km: float) -> Decimal:
    return Decimal(str(round(km, 1)))


def geocode(address: Address, session: Optional[requests.Session] = None) -> Tuple[float, float]:
    http = session or requests
    r = http.get(
        NOMINATIM_SEARCH_URL,
        params={"format": "json", "q": format_address(address), "limit": 1},
        headers={"User-Agent": NOMINATIM_USER_AGENT},
        timeout=DISTANCE_TIMEOUT_SECONDS,
    )
    r.raise_for_status()
    hits = r.json()
    if not hits:
        raise DistanceLookupError(f"address not found: {format_address(address)}")
    return float(hits[0]["lat"]), float(hits[0]["lon"])


def _google_distance(address: Address, session: Optional[requests.Session] = None) -> Decimal:
    http = session or requests
    r = http.get(
        GOOGLE_DISTANCE_URL,
        params={
            "origins": format_address(WAREHOUSE),
            "destinations": format_address(address),
            "units": "metric",
            "key": GOOGLE_MAPS_API_KEY,
        },
        timeout=DISTANCE_TIMEOUT_SECONDS,
    )
    r.raise_for_status()
    data = r.json()

    try:
        element = data["rows"][0]["elements"][0]
    except (KeyError, IndexError, TypeError):
        raise DistanceLookupError(f"unexpected Distance Matrix response: {data.get('status')}")

    if data.get("status") != "OK" or element.get("status") != "OK":
        raise DistanceLookupError(f"Distance Matrix could not route to {format_address(address)}")

    return _round_km(element["distance"]["value"] / 1000)


def calculate_distance_to_warehouse(
    address: Address, session: Optional[requests.Session] = None
) -> DistanceResult:
    try:
        if GOOGLE_MAPS_API_KEY:
            return DistanceResult(distance_km=_google_distance(address, session), method="google")

        origin = geocode(WAREHOUSE, session)
        destination = geocode(address, session)
        return DistanceResult(distance_km=_round_km(haversine_km(origin, destination)), method="haversine")
    except requests.RequestException as e:
        logger.warning("Distance lookup failed for %s: %s", format_address(address), e)
        raise DistanceLookupError(f"distance lookup failed: {e}") from e
