import logging
import webbrowser

import requests

from ambutrack import configure_logging
from ambutrack.directions import fetch_route
from ambutrack.polyline_code import compile_segments
from ambutrack.tracking import TrackingStatus, build_tracking_segments, estimate_eta, split_route
from ambutrack.tracking_map import MapMarker, draw_preview_map, generate_tracking_map_html

logger = logging.getLogger("ambutrack.demo")

# Coordinates: (lat, lng)
ambulance_base = (51.2562, 7.1508)     # Wuppertal
patient = (51.2277, 6.7735)            # Düsseldorf
driver_now = (51.2405, 6.9620)

# used when no API key is around
SAMPLE_ROUTE = [
    (51.2562, 7.1508), (51.2531, 7.0904), (51.2468, 7.0215),
    (51.2405, 6.9620), (51.2352, 6.8911), (51.2301, 6.8207), (51.2277, 6.7735),
]


def main():
    configure_logging()
    try:
        route = fetch_route(ambulance_base, patient)
    except (RuntimeError, requests.RequestException) as e:
        logger.warning("using sample route: %s", e)
        route = SAMPLE_ROUTE

    traveled, remaining = split_route(route, driver_now)
    segments = build_tracking_segments(traveled, remaining, TrackingStatus.EN_ROUTE_TO_PATIENT)
    eta = estimate_eta(driver_now, patient)
    logger.info("ETA %s (%s)", eta.minutes_label, eta.distance_label)
    logger.debug("polyline script:\n%s", compile_segments(segments))

    markers = [
        MapMarker(driver_now, title="Ambulance", color="#2563EB"),
        MapMarker(patient, title="Patient"),
    ]
    with open("tracking.html", "w", encoding="utf-8") as f:
        f.write(generate_tracking_map_html(driver_now, markers, segments))

    draw_preview_map(segments, center=driver_now, markers=markers, path="map.html")
    webbrowser.open("map.html")


if __name__ == "__main__":
    main()
