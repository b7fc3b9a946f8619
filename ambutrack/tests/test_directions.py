# test_directions.py
import polyline
import pytest

from ambutrack import directions
from ambutrack.directions import DirectionsError, fetch_route, load_api_key

POINTS = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]


class FakeResponse:
    def __init__(self, data, status_code=200):
        self.data = data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise directions.requests.HTTPError(f"{self.status_code}")

    def json(self):
        return self.data


def fake_get(data, calls, status_code=200):
    def _get(url, params=None, timeout=None):
        calls.append((url, params, timeout))
        return FakeResponse(data, status_code)
    return _get


def test_fetch_route_decodes_overview(monkeypatch):
    calls = []
    data = {"status": "OK", "routes": [{"overview_polyline": {"points": polyline.encode(POINTS)}}]}
    monkeypatch.setattr(directions.requests, "get", fake_get(data, calls))

    pts = fetch_route((1.5, 2.5), (3, 4), api_key="k")

    assert pts == [pytest.approx(p) for p in POINTS]
    url, params, timeout = calls[0]
    assert url == directions.DIRECTIONS_URL
    assert params == {"origin": "1.5,2.5", "destination": "3,4", "mode": "driving", "key": "k"}
    assert timeout == 60


def test_fetch_route_bad_status(monkeypatch):
    data = {"status": "REQUEST_DENIED", "error_message": "bad key", "routes": []}
    monkeypatch.setattr(directions.requests, "get", fake_get(data, []))
    with pytest.raises(DirectionsError, match="REQUEST_DENIED"):
        fetch_route((0, 0), (1, 1), api_key="k")


def test_fetch_route_http_error(monkeypatch):
    monkeypatch.setattr(directions.requests, "get", fake_get({}, [], status_code=500))
    with pytest.raises(directions.requests.HTTPError):
        fetch_route((0, 0), (1, 1), api_key="k")


def test_load_api_key(monkeypatch, tmp_path):
    monkeypatch.setenv(directions.API_KEY_ENV, " env-key ")
    assert load_api_key(str(tmp_path / "missing.txt")) == "env-key"

    monkeypatch.delenv(directions.API_KEY_ENV)
    key_file = tmp_path / "key.txt"
    key_file.write_text("file-key\n", encoding="utf-8")
    assert load_api_key(str(key_file)) == "file-key"

    with pytest.raises(RuntimeError):
        load_api_key(str(tmp_path / "missing.txt"))
