"""Google Maps Elevation web service client.

Returns ground (orthometric) elevation for a batch of points. A non-`OK`
status is reported per point and left for the caller to treat as fatal;
transport failures raise `ElevationLookupError`.
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from .. import constants

log = logging.getLogger(__name__)

_ENV_FILE = ".env"


class ElevationLookupError(RuntimeError):
    """Raised when the elevation service cannot be reached or answers non-200."""


@dataclass
class ElevationSample:
    latitude_deg: float
    longitude_deg: float
    status: str
    elevation_m: Optional[float] = None
    resolution_m: Optional[float] = None

    @property
    def ok(self) -> bool:
        return (
            self.status == constants.ELEVATION_STATUS_OK
            and self.elevation_m is not None
            and math.isfinite(self.elevation_m)
        )


def _parse_key_line(line: str) -> Optional[str]:
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    if "=" in stripped:
        key, value = stripped.split("=", 1)
        if key.strip() != "GOOGLE_MAPS_API_KEY":
            return None
        candidate = value.strip().strip('"').strip("'")
    else:
        candidate = stripped
    return candidate or None


def _read_key_from_path(path: Path) -> Optional[str]:
    if not path.exists():
        return None
    try:
        for line in path.read_text(encoding="utf8").splitlines():
            candidate = _parse_key_line(line)
            if candidate:
                return candidate
    except OSError as exc:  # pragma: no cover
        log.warning("Failed to read API key file %s: %s", path, exc)
    return None


def resolve_api_key(explicit: Optional[str], search_root: Optional[Path] = None) -> Optional[str]:
    """Find a Maps API key: argument, env var, key file env var, then `.env`."""
    if explicit:
        return explicit

    env_key = os.getenv("GOOGLE_MAPS_API_KEY")
    if env_key:
        return env_key

    key_file_env = os.getenv("GOOGLE_MAPS_API_KEY_FILE")
    if key_file_env:
        key = _read_key_from_path(Path(key_file_env).expanduser())
        if key:
            return key

    root = search_root if search_root is not None else Path.cwd()
    return _read_key_from_path(root / _ENV_FILE)


def _finite_or_none(value) -> Optional[float]:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _format_location(lat: float, lng: float) -> str:
    return f"{lat:.{constants.QUERY_COORD_DECIMALS}f},{lng:.{constants.QUERY_COORD_DECIMALS}f}"


class GoogleElevationClient:
    """Thin wrapper around the Elevation web service.

    Construct once and reuse; the underlying `requests.Session` keeps its
    connection pool between calls.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = constants.HTTP_TIMEOUT_S,
        retries: int = constants.HTTP_RETRIES,
        session: Optional[requests.Session] = None,
        url: str = constants.ELEVATION_API_URL,
    ):
        api_key = resolve_api_key(api_key)
        if not api_key:
            raise RuntimeError(
                "Google Maps API key not provided. Set GOOGLE_MAPS_API_KEY, provide "
                "GOOGLE_MAPS_API_KEY_FILE, add it to .env, or pass api_key=..."
            )
        self.api_key = api_key
        self.timeout = timeout
        self.url = url

        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": constants.USER_AGENT})
            retry = Retry(
                total=retries,
                read=retries,
                connect=retries,
                backoff_factor=0.8,
                status_forcelist=(429, 500, 502, 503, 504),
                allowed_methods={"GET"},
            )
            session.mount("https://", HTTPAdapter(max_retries=retry))
        self.session = session

    # ------------------------------------------------------------------
    # Internal helpers
    def _get(self, params: Dict[str, str]) -> Dict:
        try:
            resp = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ElevationLookupError(f"Elevation request failed: {exc}") from exc
        if resp.status_code != 200:
            raise ElevationLookupError(f"Elevation service answered HTTP {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise ElevationLookupError("Elevation service returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise ElevationLookupError(f"Unexpected elevation payload: {payload!r}")
        return payload

    # ------------------------------------------------------------------
    # Public API
    def get_elevations(
        self,
        locations: Sequence[Tuple[float, float]],
        chunk_size: int = constants.ELEVATION_MAX_LOCATIONS_PER_REQUEST,
    ) -> List[ElevationSample]:
        """Return one `ElevationSample` per ``(lat, lng)`` in *locations*, in order."""
        if not locations:
            return []
        collected: List[ElevationSample] = []
        for start in range(0, len(locations), chunk_size):
            batch = [(float(lat), float(lng)) for lat, lng in locations[start : start + chunk_size]]
            params = {
                "locations": "|".join(_format_location(lat, lng) for lat, lng in batch),
                "key": self.api_key,
            }
            log.info("Querying elevation service for %d location(s)", len(batch))
            payload = self._get(params)
            collected.extend(self._samples_from_payload(batch, payload))
        return collected

    def get_elevation(self, lat: float, lng: float) -> ElevationSample:
        return self.get_elevations([(lat, lng)])[0]

    @staticmethod
    def _samples_from_payload(batch: Sequence[Tuple[float, float]], payload: Dict) -> List[ElevationSample]:
        status = str(payload.get("status") or "UNKNOWN_ERROR")
        if status != constants.ELEVATION_STATUS_OK:
            log.warning("Elevation service status %s: %s", status, payload.get("error_message", ""))
            return [ElevationSample(lat, lng, status=status) for lat, lng in batch]

        results = payload.get("results")
        if not isinstance(results, list):
            results = []
        samples: List[ElevationSample] = []
        for idx, (lat, lng) in enumerate(batch):
            item = results[idx] if idx < len(results) else None
            if not isinstance(item, dict) or item.get("elevation") is None:
                samples.append(ElevationSample(lat, lng, status="NO_RESULT"))
                continue
            elevation = _finite_or_none(item["elevation"])
            if elevation is None:
                log.warning("Unexpected elevation value %r at (%s, %s)", item["elevation"], lat, lng)
                samples.append(ElevationSample(lat, lng, status="NO_RESULT"))
                continue
            samples.append(
                ElevationSample(
                    lat,
                    lng,
                    status=status,
                    elevation_m=elevation,
                    resolution_m=_finite_or_none(item.get("resolution")),
                )
            )
        return samples
