from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

LatLon = Tuple[float, float]  # (lat, lng)


def check_number(v: Any, name: str) -> float:
    # bool is an int subclass but never a coordinate or a style value
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError(f"{name} must be a number, got {v!r}")
    return v


def to_latlon(point: Any) -> LatLon:
    """Accepts {"lat", "lng"}, {"lat", "lon"} or a [lat, lng] pair."""
    if isinstance(point, dict):
        lng = point["lng"] if "lng" in point else point["lon"]
        lat = point["lat"]
    elif isinstance(point, (list, tuple)) and len(point) == 2:
        lat, lng = point
    else:
        raise ValueError(f"invalid point {point!r}")
    return check_number(lat, "lat"), check_number(lng, "lng")


def _optional_number(data: Dict[str, Any], name: str, *keys: str) -> Optional[float]:
    # JSON null means "not given", same as a missing key
    for key in keys:
        if data.get(key) is not None:
            return check_number(data[key], name)
    return None


@dataclass(frozen=True)
class RouteSegment:
    """
    One contiguous piece of a route, drawn as a single styled line.
    coordinates: polyline points in draw order
    dash_array: any non-empty value switches the segment to dashed mode
    weight / opacity / z_index: None means "use the renderer default"
    """
    coordinates: List[LatLon] = field(default_factory=list)
    color: Optional[str] = None
    weight: Optional[float] = None
    opacity: Optional[float] = None
    dash_array: Optional[str] = None
    z_index: Optional[int] = None

    @property
    def is_dashed(self) -> bool:
        return bool(self.dash_array)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RouteSegment":
        if not isinstance(data, dict):
            raise ValueError(f"segment must be an object, got {data!r}")

        if "coordinates" in data:
            if not isinstance(data["coordinates"], list):
                raise ValueError("'coordinates' must be a list")
            coords = [to_latlon(p) for p in data["coordinates"]]
        elif "from" in data and "to" in data:
            # hospital dashboard sends straight from -> to legs
            coords = [to_latlon(data["from"]), to_latlon(data["to"])]
        else:
            raise KeyError("segment needs 'coordinates' or 'from'/'to'")

        z_index = _optional_number(data, "zIndex", "zIndex", "z_index")
        if z_index is not None and not isinstance(z_index, int):
            raise ValueError(f"zIndex must be an integer, got {z_index!r}")

        return cls(
            coordinates=coords,
            color=data.get("color"),
            weight=_optional_number(data, "weight", "weight"),
            opacity=_optional_number(data, "opacity", "opacity"),
            dash_array=data.get("dashArray", data.get("dash_array")),
            z_index=z_index,
        )
