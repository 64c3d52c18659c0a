"""
Design (location.py)
- Purpose: Turn the device position into a human-readable address, best effort.
- Inputs: A GPS fix from plyer.gps (or coordinates passed to resolve()).
- Outputs: last_location / last_address attributes; listeners called after each resolution.
- Side effects: Starts/stops the platform GPS service; one HTTP request per resolution.
- Thread-safety: Resolutions run on daemon worker threads; the last one to finish wins.
                 Listeners are called from the worker thread, so UI code must re-post
                 onto its own loop (Tk.after).
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests
from plyer import gps

from .config import (
    GEOCODER_TIMEOUT_SEC,
    GEOCODER_URL,
    GEOCODER_USER_AGENT,
    GPS_MIN_DISTANCE_M,
    GPS_MIN_TIME_MS,
)
from .logger import get_logger

logger = get_logger(__name__)

ADDRESS_SEPARATOR = " • "
_CITY_KEYS = ("city", "town", "village", "hamlet")


def format_address(parts: Dict[str, Any]) -> str | None:
    """
    Purpose: Build '<number> <road> • <city>, <state> • <postcode>' from a Nominatim
             'address' dict, skipping whatever is missing.
    Outputs: The formatted string, or None if no piece is available.
    """
    street = " ".join(p for p in (parts.get("house_number"), parts.get("road")) if p)
    city = next((parts[k] for k in _CITY_KEYS if parts.get(k)), None)
    region = ", ".join(p for p in (city, parts.get("state")) if p)
    postcode = parts.get("postcode") or ""
    lines = [line for line in (street, region, postcode) if line]
    return ADDRESS_SEPARATOR.join(lines) if lines else None


class NominatimGeocoder:
    """Reverse geocoding against an OpenStreetMap Nominatim endpoint (no retries)."""

    def __init__(self, url: str = GEOCODER_URL, user_agent: str = GEOCODER_USER_AGENT,
                 timeout: float = GEOCODER_TIMEOUT_SEC) -> None:
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout

    def reverse(self, lat: float, lon: float) -> str | None:
        """
        Purpose: Resolve coordinates to a formatted address.
        Outputs: Address string, or None on any HTTP/network/JSON failure or empty result.
        """
        params = {"lat": lat, "lon": lon, "format": "jsonv2", "addressdetails": 1}
        try:
            response = requests.get(
                self.url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.warning("Geocoding error for (%s, %s): %s", lat, lon, exc)
            return None
        except ValueError as exc:
            logger.warning("Geocoding returned invalid JSON: %s", exc)
            return None
        if not isinstance(data, dict) or "error" in data:
            logger.info("No address for (%s, %s): %s", lat, lon, data)
            return None
        return format_address(data.get("address") or {})


class LocationService:
    """
    Design (LocationService)
    - State:
        last_location: (lat, lon) of the most recent fix, or None
        last_address: address of the most recently finished resolution, or None
    - Methods:
        capture_address(): ask the platform GPS for one fix; resolution follows automatically
        resolve(lat, lon): reverse-geocode on a worker thread (never blocks)
        subscribe(listener): called after each resolution finishes
        stop(): stop GPS updates
    """

    def __init__(self, geocoder: Optional[NominatimGeocoder] = None, gps_facade: Any = gps) -> None:
        self.geocoder = geocoder or NominatimGeocoder()
        self._gps = gps_facade
        self._gps_configured = False
        self._lock = threading.Lock()
        self._listeners: List[Callable[[], None]] = []
        self.last_location: Tuple[float, float] | None = None
        self.last_address: str | None = None

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------- GPS --------

    def capture_address(self) -> bool:
        """
        Purpose: Request a single GPS fix. Platforms without a GPS backend (desktop) log a
                 warning and the address simply stays unavailable.
        Outputs: True if the request was issued.
        """
        try:
            if not self._gps_configured:
                self._gps.configure(on_location=self._on_location, on_status=self._on_status)
                self._gps_configured = True
            self._gps.start(minTime=GPS_MIN_TIME_MS, minDistance=GPS_MIN_DISTANCE_M)
        except NotImplementedError:
            logger.warning("Location error: GPS is not available on this platform")
            return False
        except Exception:
            logger.exception("Location error: could not start GPS")
            return False
        return True

    def stop(self) -> None:
        if not self._gps_configured:
            return
        try:
            self._gps.stop()
        except Exception:
            logger.exception("Location error: could not stop GPS")

    def _on_location(self, **kwargs: Any) -> None:
        lat, lon = kwargs.get("lat"), kwargs.get("lon")
        if lat is None or lon is None:
            return
        # one fix per capture
        self.stop()
        self.resolve(float(lat), float(lon))

    def _on_status(self, stype: str, status: str) -> None:
        logger.info("GPS status %s: %s", stype, status)

    # -------- geocoding --------

    def resolve(self, lat: float, lon: float) -> threading.Thread:
        """
        Purpose: Start reverse geocoding for (lat, lon) on a daemon thread.
        Outputs: The started thread (callers normally ignore it).
        Thread-safety: Overlapping calls are allowed; whichever finishes last sets last_address.
        """
        with self._lock:
            self.last_location = (lat, lon)
        worker = threading.Thread(target=self._resolve, args=(lat, lon), name="geocoder", daemon=True)
        worker.start()
        return worker

    def _resolve(self, lat: float, lon: float) -> None:
        try:
            address = self.geocoder.reverse(lat, lon)
        except Exception:
            logger.exception("Location error: geocoder failed")
            address = None
        with self._lock:
            self.last_address = address
        logger.info("Resolved (%.5f, %.5f) -> %s", lat, lon, address or "no address")
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Location listener %r failed", listener)
