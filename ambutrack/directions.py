import logging
import os
from typing import List, Optional

import polyline
import requests

from ambutrack.RouteSegment import LatLon

logger = logging.getLogger(__name__)

DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
API_KEY_ENV = "GOOGLE_MAPS_API_KEY"
KEY_FILE = "key.txt"


class DirectionsError(RuntimeError):
    pass


def load_api_key(path: str = KEY_FILE) -> str:
    key = os.environ.get(API_KEY_ENV, "").strip()
    if key:
        return key
    try:
        with open(path, "r", encoding="utf-8") as f:
            key = f.readline().strip()
    except FileNotFoundError:
        key = ""
    if not key:
        raise RuntimeError(f"No Google Maps API key: set {API_KEY_ENV} or create {path}")
    return key


def fetch_route(origin: LatLon,
                destination: LatLon,
                api_key: Optional[str] = None,
                mode: str = "driving") -> List[LatLon]:
    if api_key is None:
        api_key = load_api_key()

    a_lat, a_lon = origin
    b_lat, b_lon = destination
    params = {
        "origin": f"{a_lat},{a_lon}",
        "destination": f"{b_lat},{b_lon}",
        "mode": mode,
        "key": api_key,
    }

    r = requests.get(DIRECTIONS_URL, params=params, timeout=60)
    r.raise_for_status()
    data = r.json()
    status = data.get("status")
    if status != "OK" or not data.get("routes"):
        raise DirectionsError(f"Directions request failed: {status} {data.get('error_message', '')}".strip())

    route = data["routes"][0]
    points = polyline.decode(route["overview_polyline"]["points"])
    logger.info("route fetched: %d points (%s)", len(points), mode)
    return [(lat, lon) for lat, lon in points]
