import logging
from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import quote

import folium

from ambutrack.RouteSegment import LatLon, RouteSegment
from ambutrack.polyline_code import (build_instructions, compile_segments,
                                     js_number, js_point, js_string)

logger = logging.getLogger(__name__)

MARKER_COLOR = "#DC2626"
MARKER_Z_BASE = 300
MAP_ZOOM = 13
MAPS_LOADER_URL = "https://maps.googleapis.com/maps/api/js"


@dataclass(frozen=True)
class MapMarker:
    position: LatLon
    title: str = ""
    color: str = MARKER_COLOR


def _marker_code(index: int, marker: MapMarker) -> str:
    return f"""
      new google.maps.Marker({{
        position: {js_point(marker.position)},
        map: map,
        title: {js_string(marker.title or '')},
        icon: {{
          path: google.maps.SymbolPath.CIRCLE,
          scale: 12,
          fillColor: {js_string(marker.color)},
          fillOpacity: 1,
          strokeColor: '#FFFFFF',
          strokeWeight: 3
        }},
        zIndex: {js_number(MARKER_Z_BASE + index)}
      }});"""


def _indent(code: str, prefix: str) -> str:
    return "\n".join(prefix + line if line else line for line in code.splitlines())


def generate_tracking_map_html(center: LatLon,
                               markers: Sequence[MapMarker] = (),
                               segments: Sequence[RouteSegment] = (),
                               api_key: str = "") -> str:
    """Standalone page for a WebView: markers first, then the route polylines."""
    polyline_code = compile_segments(segments)
    markers_code = "\n".join(_marker_code(i, m) for i, m in enumerate(markers))

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Ambulance Tracking Map</title>
  <style>
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    html, body {{ height: 100%; width: 100%; }}
    #map {{ height: 100%; width: 100%; }}
  </style>
</head>
<body>
  <div id="map"></div>

  <script>
    let map;

    function initMap() {{
      map = new google.maps.Map(document.getElementById('map'), {{
        center: {js_point(center)},
        zoom: {MAP_ZOOM},
        mapTypeControl: false,
        streetViewControl: false,
        fullscreenControl: true,
        zoomControl: true,
        styles: [
          {{
            featureType: 'poi',
            elementType: 'labels',
            stylers: [{{ visibility: 'off' }}]
          }}
        ]
      }});

      // markers
{markers_code}

      // tracking polylines
{_indent(polyline_code, '      ')}
    }}
  </script>
  <script async defer
    src="{MAPS_LOADER_URL}?key={quote(api_key, safe='')}&callback=initMap">
  </script>
</body>
</html>
"""


# -------------------------
# offline preview
# -------------------------
def draw_preview_map(segments: Sequence[RouteSegment],
                     center: Optional[LatLon] = None,
                     markers: Sequence[MapMarker] = (),
                     path: Optional[str] = None) -> folium.Map:
    segments = list(segments or ())
    instructions = build_instructions(segments)

    if center is None:
        first = next((ins.points[0] for ins in instructions if ins.points), None)
        center = first if first is not None else (0.0, 0.0)

    m = folium.Map(location=list(center), zoom_start=MAP_ZOOM)

    for ins, seg in zip(instructions, segments):
        if not ins.points:
            continue
        if ins.dash_icon is not None:
            # leaflet dashes natively, no need for the invisible stroke trick
            folium.PolyLine(ins.points, color=ins.color, weight=ins.weight,
                            opacity=ins.dash_icon.stroke_opacity, dash_array=seg.dash_array,
                            tooltip=ins.ident).add_to(m)
        else:
            folium.PolyLine(ins.points, color=ins.color, weight=ins.weight,
                            opacity=ins.opacity, tooltip=ins.ident).add_to(m)

    for marker in markers:
        folium.CircleMarker(list(marker.position), radius=8, color="#FFFFFF", weight=3,
                            fill=True, fill_color=marker.color, fill_opacity=1,
                            tooltip=marker.title or None).add_to(m)

    if path is not None:
        m.save(path)
        logger.info("preview map saved to %s", path)
    return m
