import logging

from ambutrack.RouteSegment import LatLon, RouteSegment
from ambutrack.polyline_code import InvalidSegmentError, compile_segments


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = [
    "LatLon",
    "RouteSegment",
    "InvalidSegmentError",
    "compile_segments",
    "configure_logging",
]
