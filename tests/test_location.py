"""Tests for address formatting, reverse geocoding and the location service."""

import threading

import pytest
import requests

import hunt.location as location
from hunt.location import LocationService, NominatimGeocoder, format_address


class _FakeResponse:
    def __init__(self, payload=None, status_error=None, json_error=None) -> None:
        self.payload = payload
        self.status_error = status_error
        self.json_error = json_error

    def raise_for_status(self) -> None:
        if self.status_error:
            raise self.status_error

    def json(self):
        if self.json_error:
            raise self.json_error
        return self.payload


class _FakeGeocoder:
    def __init__(self, results: dict | None = None) -> None:
        self.results = results or {}
        self.calls = []

    def reverse(self, lat: float, lon: float):
        self.calls.append((lat, lon))
        result = self.results.get((lat, lon))
        if isinstance(result, Exception):
            raise result
        return result


class _FakeGps:
    def __init__(self, unsupported: bool = False) -> None:
        self.unsupported = unsupported
        self.on_location = None
        self.started = 0
        self.stopped = 0

    def configure(self, on_location, on_status=None) -> None:
        if self.unsupported:
            raise NotImplementedError()
        self.on_location = on_location

    def start(self, minTime: int, minDistance: int) -> None:
        self.started += 1

    def stop(self) -> None:
        self.stopped += 1


def test_format_full_address() -> None:
    parts = {"house_number": "123", "road": "Main St", "city": "Springfield",
             "state": "Illinois", "postcode": "62701", "country": "United States"}
    assert format_address(parts) == "123 Main St • Springfield, Illinois • 62701"


def test_format_address_falls_back_to_town_and_skips_missing() -> None:
    assert format_address({"road": "High St", "town": "Lewes"}) == "High St • Lewes"
    assert format_address({"postcode": "10115"}) == "10115"


def test_format_address_empty() -> None:
    assert format_address({}) is None
    assert format_address({"country": ""}) is None


def test_reverse_requests_nominatim(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = {}

    def fake_get(url, params, headers, timeout):
        captured.update(url=url, params=params, headers=headers, timeout=timeout)
        return _FakeResponse({"address": {"road": "Quay St", "city": "Galway"}})

    monkeypatch.setattr(location.requests, "get", fake_get)
    geocoder = NominatimGeocoder(url="https://geo.test/reverse", user_agent="hunt-tests", timeout=3)
    assert geocoder.reverse(53.27, -9.05) == "Quay St • Galway"
    assert captured["url"] == "https://geo.test/reverse"
    assert captured["params"]["lat"] == 53.27 and captured["params"]["lon"] == -9.05
    assert captured["headers"] == {"User-Agent": "hunt-tests"}
    assert captured["timeout"] == 3


@pytest.mark.parametrize(
    "response",
    [
        _FakeResponse(status_error=requests.HTTPError("503")),
        _FakeResponse(json_error=ValueError("no json")),
        _FakeResponse({"error": "Unable to geocode"}),
        _FakeResponse(["unexpected"]),
    ],
)
def test_reverse_failures_yield_none(monkeypatch: pytest.MonkeyPatch, response: _FakeResponse) -> None:
    monkeypatch.setattr(location.requests, "get", lambda *args, **kwargs: response)
    assert NominatimGeocoder().reverse(0.0, 0.0) is None


def test_reverse_network_error_yields_none(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_get(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(location.requests, "get", fake_get)
    assert NominatimGeocoder().reverse(1.0, 2.0) is None


def test_resolve_publishes_address_and_notifies() -> None:
    service = LocationService(geocoder=_FakeGeocoder({(1.0, 2.0): "1 Test Rd"}), gps_facade=_FakeGps())
    seen = []
    service.subscribe(lambda: seen.append(service.last_address))

    service.resolve(1.0, 2.0).join(timeout=5)

    assert service.last_location == (1.0, 2.0)
    assert service.last_address == "1 Test Rd"
    assert seen == ["1 Test Rd"]


def test_failed_resolution_means_no_address() -> None:
    geocoder = _FakeGeocoder({(1.0, 1.0): "Somewhere", (2.0, 2.0): RuntimeError("boom")})
    service = LocationService(geocoder=geocoder, gps_facade=_FakeGps())
    service.resolve(1.0, 1.0).join(timeout=5)
    service.resolve(2.0, 2.0).join(timeout=5)
    assert service.last_address is None


def test_overlapping_resolutions_last_writer_wins() -> None:
    release_slow = threading.Event()

    class _SlowFirst(_FakeGeocoder):
        def reverse(self, lat, lon):
            if lat == 1.0:
                release_slow.wait(timeout=5)
                return "slow result"
            return "fast result"

    service = LocationService(geocoder=_SlowFirst(), gps_facade=_FakeGps())
    slow = service.resolve(1.0, 1.0)
    service.resolve(2.0, 2.0).join(timeout=5)
    assert service.last_address == "fast result"

    release_slow.set()
    slow.join(timeout=5)
    assert service.last_address == "slow result"
    assert service.last_location == (2.0, 2.0)


def test_capture_address_without_gps_degrades() -> None:
    service = LocationService(geocoder=_FakeGeocoder(), gps_facade=_FakeGps(unsupported=True))
    assert service.capture_address() is False
    assert service.last_address is None
    service.stop()


def test_capture_address_resolves_first_fix(monkeypatch: pytest.MonkeyPatch) -> None:
    gps = _FakeGps()
    geocoder = _FakeGeocoder({(48.85, 2.35): "Paris"})
    service = LocationService(geocoder=geocoder, gps_facade=gps)
    workers = []
    real_resolve = service.resolve
    monkeypatch.setattr(service, "resolve", lambda lat, lon: workers.append(real_resolve(lat, lon)))

    assert service.capture_address() is True
    assert gps.started == 1
    gps.on_location(lat=48.85, lon=2.35, speed=0.0, bearing=0.0, altitude=30.0, accuracy=5.0)
    workers[0].join(timeout=5)

    assert gps.stopped == 1
    assert service.last_address == "Paris"

    gps.on_location(speed=1.0)
    assert len(workers) == 1
