import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from ambutrack.RouteSegment import LatLon, RouteSegment

EARTH_RADIUS_M = 6371000.0
DEFAULT_SPEED_KMH = 40.0  # average city traffic

TRAVELED_COLOR = "#3b82f6"
TO_PATIENT_COLOR = "#10b981"
TO_HOSPITAL_COLOR = "#f97316"
TRAVELED_DASH = "10, 5"


class TrackingStatus(Enum):
    EN_ROUTE_TO_PATIENT = "en_route_to_patient"
    TRANSPORTING_TO_HOSPITAL = "transporting_to_hospital"
    COMPLETED = "completed"


# -------------------------
# small utils
# -------------------------
def haversine_m(a: LatLon, b: LatLon) -> float:
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    x = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(x))


def closest_point_index(points: Sequence[LatLon], target: LatLon) -> int:
    if not points:
        raise ValueError("points is empty")
    best_i = 0
    best_d = float("inf")
    for i, p in enumerate(points):
        d = haversine_m(p, target)
        if d < best_d:
            best_d = d
            best_i = i
    return best_i


# -------------------------
# traveled / remaining
# -------------------------
def split_route(route: Sequence[LatLon], current: LatLon) -> Tuple[List[LatLon], List[LatLon]]:
    """Both halves keep the point closest to `current` so the lines touch."""
    if not route:
        return [], []
    k = closest_point_index(route, current)
    return list(route[:k + 1]), list(route[k:])


def build_tracking_segments(traveled: Sequence[LatLon],
                            remaining: Sequence[LatLon],
                            status: TrackingStatus = TrackingStatus.EN_ROUTE_TO_PATIENT) -> List[RouteSegment]:
    segments: List[RouteSegment] = []

    if len(traveled) > 1:
        segments.append(RouteSegment(
            coordinates=list(traveled),
            color=TRAVELED_COLOR,
            weight=5,
            opacity=0.7,
            dash_array=TRAVELED_DASH,
            z_index=2,
        ))

    if len(remaining) > 1:
        color = TO_HOSPITAL_COLOR if status == TrackingStatus.TRANSPORTING_TO_HOSPITAL else TO_PATIENT_COLOR
        segments.append(RouteSegment(
            coordinates=list(remaining),
            color=color,
            weight=5,
            opacity=0.9,
            z_index=1,
        ))

    return segments


# -------------------------
# ETA
# -------------------------
@dataclass(frozen=True)
class Eta:
    distance_km: float
    minutes: int

    @property
    def distance_label(self) -> str:
        return f"{self.distance_km:.1f} km"

    @property
    def minutes_label(self) -> str:
        return f"{self.minutes} min"


def estimate_eta(a: LatLon, b: LatLon, speed_kmh: float = DEFAULT_SPEED_KMH) -> Eta:
    if speed_kmh <= 0:
        raise ValueError(f"speed_kmh must be positive, got {speed_kmh}")
    km = haversine_m(a, b) / 1000.0
    # round half up
    minutes = int(math.floor(km / speed_kmh * 60 + 0.5))
    return Eta(distance_km=km, minutes=minutes)
