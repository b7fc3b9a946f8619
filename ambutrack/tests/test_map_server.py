# test_map_server.py
import asyncio

from aiohttp import test_utils

from ambutrack.map_server import make_app

SEGMENT = {"coordinates": [{"lat": 1, "lng": 2}, {"lat": 3, "lng": 4}], "color": "#FF0000"}
DASHED = {"from": {"lat": 3, "lng": 4}, "to": {"lat": 5, "lng": 6}, "color": "#3b82f6",
          "opacity": 0.8, "dashArray": "5,5"}


async def _with_client(fn):
    client = test_utils.TestClient(test_utils.TestServer(make_app(api_key="test-key")))
    await client.start_server()
    try:
        await fn(client)
    finally:
        await client.close()


async def _test_health(client):
    r = await client.get("/health")
    assert r.status == 200
    assert await r.json() == {"status": "ok"}


async def _test_polylines(client):
    r = await client.post("/polylines", json={"segments": [SEGMENT, DASHED]})
    assert r.status == 200
    assert r.content_type == "text/javascript"
    script = await r.text()
    assert script.count("new google.maps.Polyline(") == 2
    assert "polyline1.setMap(map);" in script
    assert "icons: [{" in script

    r = await client.post("/polylines", json={"segments": []})
    assert r.status == 200
    assert await r.text() == ""


async def _test_polylines_errors(client):
    r = await client.post("/polylines", json={"segments": [SEGMENT, {"coordinates": []}]})
    assert r.status == 400
    assert "segment 1" in (await r.json())["error"]

    r = await client.post("/polylines", data=b"not json", headers={"Content-Type": "application/json"})
    assert r.status == 400

    r = await client.post("/polylines", json={"segments": [{"color": "red"}]})
    assert r.status == 400


async def _test_polylines_wrong_types(client):
    script_in_lat = {"coordinates": [{"lat": "0}]}); alert(1); ([{x:0", "lng": 2}], "color": "red"}
    bad_bodies = [
        {"segments": [script_in_lat]},
        {"segments": [{"coordinates": [{"lat": None, "lng": 2}], "color": "red"}]},
        {"segments": [{"coordinates": [{"lat": True, "lng": 2}], "color": "red"}]},
        {"segments": [{"coordinates": [[1, 2, 3]], "color": "red"}]},
        {"segments": [dict(SEGMENT, weight="x")]},
        {"segments": [dict(SEGMENT, opacity="1); alert(1")]},
        {"segments": [dict(SEGMENT, zIndex=1.5)]},
        {"segments": ["not a segment"]},
    ]
    for body in bad_bodies:
        r = await client.post("/polylines", json=body)
        assert r.status == 400, body
        assert "error" in await r.json()

    # null optional fields mean "use the default"
    r = await client.post("/polylines", json={"segments": [dict(SEGMENT, weight=None, zIndex=None)]})
    assert r.status == 200
    script = await r.text()
    assert "strokeWeight: 4," in script
    assert "zIndex: 1," in script
    assert "None" not in script


async def _test_tracking_map(client):
    body = {
        "center": {"lat": 3, "lng": 4},
        "markers": [{"position": {"lat": 3, "lng": 4}, "title": "Ambulance"}],
        "segments": [SEGMENT],
    }
    r = await client.post("/tracking-map", json=body)
    assert r.status == 200
    assert r.content_type == "text/html"
    html = await r.text()
    assert "key=test-key&callback=initMap" in html
    assert "title: 'Ambulance'," in html

    r = await client.post("/tracking-map", json={"segments": [SEGMENT]})
    assert r.status == 400


async def _test_tracking_map_wrong_types(client):
    position = {"lat": 3, "lng": 4}
    bad_bodies = [
        {"center": {"lat": "3}); alert(1", "lng": 4}},
        {"center": "nowhere"},
        {"center": position, "markers": [{"position": {"lat": 3, "lng": None}}]},
        {"center": position, "markers": [{"position": position, "title": 5}]},
        {"center": position, "markers": [{"position": position, "color": ["#fff"]}]},
        {"center": position, "markers": ["marker"]},
        {"center": position, "markers": {"position": position}},
    ]
    for body in bad_bodies:
        r = await client.post("/tracking-map", json=body)
        assert r.status == 400, body
        assert "error" in await r.json()


def test_health():
    asyncio.run(_with_client(_test_health))


def test_polylines():
    asyncio.run(_with_client(_test_polylines))


def test_polylines_errors():
    asyncio.run(_with_client(_test_polylines_errors))


def test_tracking_map():
    asyncio.run(_with_client(_test_tracking_map))


def test_polylines_wrong_types():
    asyncio.run(_with_client(_test_polylines_wrong_types))


def test_tracking_map_wrong_types():
    asyncio.run(_with_client(_test_tracking_map_wrong_types))
