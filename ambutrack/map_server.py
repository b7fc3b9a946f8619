import logging
from typing import Any, Dict, List

from aiohttp import web

from ambutrack.RouteSegment import RouteSegment, to_latlon
from ambutrack.polyline_code import compile_segments
from ambutrack.tracking_map import MapMarker, generate_tracking_map_html

logger = logging.getLogger(__name__)

API_KEY = web.AppKey("api_key", str)


def parse_segments(body: Dict[str, Any]) -> List[RouteSegment]:
    raw = body.get("segments") or []
    if not isinstance(raw, list):
        raise ValueError("'segments' must be a list")
    return [RouteSegment.from_dict(s) for s in raw]


def parse_markers(body: Dict[str, Any]) -> List[MapMarker]:
    raw = body.get("markers") or []
    if not isinstance(raw, list):
        raise ValueError("'markers' must be a list")

    markers = []
    for i, m in enumerate(raw):
        if not isinstance(m, dict):
            raise ValueError(f"marker {i} must be an object")
        kwargs = {"position": to_latlon(m["position"])}
        for key in ("title", "color"):
            value = m.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"marker {i}: {key} must be a string, got {value!r}")
            if value:
                kwargs[key] = value
        markers.append(MapMarker(**kwargs))
    return markers


def _bad_request(e: Exception) -> web.Response:
    logger.warning("rejected request: %s", e)
    return web.json_response({"error": str(e)}, status=400)


async def _read_json(request: web.Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as e:
        raise ValueError(f"invalid JSON body: {e}") from e
    if not isinstance(body, dict):
        raise ValueError("JSON body must be an object")
    return body


async def polylines(request: web.Request) -> web.Response:
    try:
        body = await _read_json(request)
        script = compile_segments(parse_segments(body))
    except (ValueError, KeyError, TypeError) as e:
        return _bad_request(e)
    return web.Response(text=script, content_type="text/javascript")


async def tracking_map(request: web.Request) -> web.Response:
    try:
        body = await _read_json(request)
        if "center" not in body:
            raise KeyError("center")
        html = generate_tracking_map_html(
            center=to_latlon(body["center"]),
            markers=parse_markers(body),
            segments=parse_segments(body),
            api_key=request.app[API_KEY],
        )
    except (ValueError, KeyError, TypeError) as e:
        return _bad_request(e)
    return web.Response(text=html, content_type="text/html")


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


def make_app(api_key: str = "") -> web.Application:
    app = web.Application()
    app[API_KEY] = api_key
    app.router.add_get("/health", health)
    app.router.add_post("/polylines", polylines)
    app.router.add_post("/tracking-map", tracking_map)
    return app


def run(host: str = "127.0.0.1", port: int = 8000, api_key: str = "") -> None:
    logger.info("map server on http://%s:%d", host, port)
    web.run_app(make_app(api_key), host=host, port=port)
