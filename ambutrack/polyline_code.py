import logging
import math
from typing import Iterable, List, Optional, Sequence

from ambutrack.RouteSegment import LatLon, RouteSegment
from ambutrack.PolylineInstruction import DashIcon, PolylineInstruction

logger = logging.getLogger(__name__)

DEFAULT_WEIGHT = 4
DEFAULT_OPACITY = 1
DEFAULT_Z_INDEX = 1
MAP_VAR = "map"


class InvalidSegmentError(ValueError):
    def __init__(self, index: int, reason: str):
        super().__init__(f"segment {index}: {reason}")
        self.index = index
        self.reason = reason


# -------------------------
# JS literal helpers
# -------------------------
def js_number(v) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float):
        if math.isnan(v):
            return "NaN"
        if math.isinf(v):
            return "Infinity" if v > 0 else "-Infinity"
        if v.is_integer():
            return str(int(v))
        return repr(v)
    if isinstance(v, int):
        return str(v)
    raise TypeError(f"not a JS number: {v!r}")


def js_string(s: str) -> str:
    escaped = (s.replace("\\", "\\\\")
                .replace("'", "\\'")
                .replace("\n", "\\n")
                .replace("\r", "\\r")
                .replace("</", "<\\/"))
    return f"'{escaped}'"


def js_point(p: LatLon) -> str:
    lat, lng = p
    return f"{{lat: {js_number(lat)}, lng: {js_number(lng)}}}"


# -------------------------
# segment -> instruction
# -------------------------
def _check_segment(index: int, segment: RouteSegment) -> None:
    color = segment.color
    if color is None:
        raise InvalidSegmentError(index, "color is required")
    if not isinstance(color, str) or not color.strip():
        raise InvalidSegmentError(index, f"invalid color {color!r}")


def build_instruction(index: int, segment: RouteSegment) -> PolylineInstruction:
    _check_segment(index, segment)

    dashed = segment.is_dashed
    if dashed:
        # the icon marks carry the color, the stroke itself stays invisible
        opacity = 0
    else:
        opacity = segment.opacity if segment.opacity is not None else DEFAULT_OPACITY

    return PolylineInstruction(
        ident=f"polyline{index}",
        points=list(segment.coordinates),
        color=segment.color,
        opacity=opacity,
        weight=segment.weight if segment.weight is not None else DEFAULT_WEIGHT,
        z_index=segment.z_index if segment.z_index is not None else DEFAULT_Z_INDEX,
        dash_icon=DashIcon() if dashed else None,
        attach_target=MAP_VAR,
    )


def build_instructions(segments: Optional[Sequence[RouteSegment]]) -> List[PolylineInstruction]:
    if not segments:
        return []
    # validate everything up front so a bad segment never yields half a script
    return [build_instruction(i, s) for i, s in enumerate(segments)]


# -------------------------
# instruction -> JS
# -------------------------
def _icons_block(icon: DashIcon) -> List[str]:
    return [
        "  icons: [{",
        "    icon: {",
        f"      path: {js_string(icon.path)},",
        f"      strokeOpacity: {js_number(icon.stroke_opacity)},",
        f"      scale: {js_number(icon.scale)}",
        "    },",
        f"    offset: {js_string(icon.offset)},",
        f"    repeat: {js_string(icon.repeat)}",
        "  }],",
    ]


def render_instruction(ins: PolylineInstruction) -> str:
    lines = [f"const {ins.ident} = new google.maps.Polyline({{"]
    if ins.points:
        lines.append("  path: [")
        lines.append(",\n".join(f"    {js_point(p)}" for p in ins.points))
        lines.append("  ],")
    else:
        lines.append("  path: [],")
    lines += [
        f"  geodesic: {js_number(ins.geodesic)},",
        f"  strokeColor: {js_string(ins.color)},",
        f"  strokeOpacity: {js_number(ins.opacity)},",
        f"  strokeWeight: {js_number(ins.weight)},",
        f"  zIndex: {js_number(ins.z_index)},",
    ]
    if ins.dash_icon is not None:
        lines += _icons_block(ins.dash_icon)
    lines.append("});")
    lines.append(f"{ins.ident}.setMap({ins.attach_target});")
    return "\n".join(lines)


def render_instructions(instructions: Iterable[PolylineInstruction]) -> str:
    return "\n".join(render_instruction(ins) for ins in instructions)


def compile_segments(segments: Optional[Sequence[RouteSegment]]) -> str:
    """
    Compile route segments into Google Maps JS that draws them on `map`.

    One `const polyline<i> = new google.maps.Polyline({...})` plus one
    `polyline<i>.setMap(map);` per segment, in input order. Empty input gives
    an empty string. Raises InvalidSegmentError if a segment has no color.
    """
    instructions = build_instructions(segments)
    if not instructions:
        return ""
    logger.debug("compiled %d polyline segment(s)", len(instructions))
    return render_instructions(instructions)
