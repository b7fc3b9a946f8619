from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from ambutrack.RouteSegment import LatLon

DASH_PATH = "M 0,-1 0,1"
DASH_REPEAT = "15px"


@dataclass(frozen=True)
class DashIcon:
    """Repeating stroke mark laid along an invisible line to fake a dash."""
    path: str = DASH_PATH
    stroke_opacity: float = 1
    scale: int = 2
    offset: str = "0"
    repeat: str = DASH_REPEAT


@dataclass(frozen=True)
class PolylineInstruction:
    """
    Fully resolved draw instruction for one segment.
    ident: script variable name, unique per segment position
    attach_target: name of the map variable in the page context
    """
    ident: str
    points: List[LatLon]
    color: str
    opacity: float
    weight: float
    z_index: int
    dash_icon: Optional[DashIcon] = None
    geodesic: bool = True
    attach_target: str = "map"
