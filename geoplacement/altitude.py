"""Precise altitude from ground elevation plus geoid undulation."""
from __future__ import annotations

import logging
import math
from typing import Optional

from . import constants
from .api.elevation_client import ElevationLookupError, GoogleElevationClient
from .api.geoid_client import GeoidClient
from .common_core import AltitudeSample

log = logging.getLogger(__name__)


class AltitudeUnavailable(RuntimeError):
    """Raised when ground elevation cannot be obtained for a point."""


def _check_coordinates(lat: float, lng: float) -> None:
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise ValueError(f"Coordinates must be finite, got ({lat}, {lng})")
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
        raise ValueError(f"Coordinates out of range: ({lat}, {lng})")


class AltitudeResolver:
    """Combine an elevation lookup and a geoid lookup into an ellipsoidal height.

    *elevation* must provide ``get_elevations([(lat, lng)])`` returning
    samples with ``ok``/``status``/``elevation_m``; *geoid* must provide
    ``get_undulation(lat, lng) -> Optional[float]``. Both are held for the
    lifetime of the resolver, so build it once and pass it down.
    """

    def __init__(self, elevation, geoid):
        self.elevation = elevation
        self.geoid = geoid

    @classmethod
    def create(
        cls,
        api_key: Optional[str] = None,
        geoid_url: Optional[str] = None,
        timeout: float = constants.HTTP_TIMEOUT_S,
        retries: int = constants.HTTP_RETRIES,
    ) -> AltitudeResolver:
        elevation = GoogleElevationClient(api_key=api_key, timeout=timeout, retries=retries)
        geoid = GeoidClient(url=geoid_url, timeout=timeout)
        return cls(elevation, geoid)

    def resolve(self, lat: float, lng: float) -> AltitudeSample:
        _check_coordinates(lat, lng)
        elevation = self._ground_elevation(lat, lng)

        warnings = []
        undulation = self.geoid.get_undulation(lat, lng)
        if undulation is None or not math.isfinite(undulation):
            message = (
                f"No geoid undulation available at ({lat:.6f}, {lng:.6f}); "
                "using 0 m, which may offset the model altitude"
            )
            log.warning(message)
            warnings.append(message)
            undulation = 0.0

        altitude = elevation + undulation
        log.debug("Elevation: %s, geoid undulation: %s, altitude: %s", elevation, undulation, altitude)
        return AltitudeSample(
            ellipsoidal_m=altitude,
            source="precise",
            ground_elevation_m=elevation,
            geoid_undulation_m=undulation,
            warnings=warnings,
        )

    def resolve_precise_altitude(self, lat: float, lng: float) -> float:
        return self.resolve(lat, lng).ellipsoidal_m

    def _ground_elevation(self, lat: float, lng: float) -> float:
        try:
            samples = self.elevation.get_elevations([(lat, lng)])
        except ElevationLookupError as exc:
            raise AltitudeUnavailable(f"Failed to get elevation for ({lat}, {lng}): {exc}") from exc
        if not samples:
            raise AltitudeUnavailable(f"Failed to get elevation for ({lat}, {lng}): no result")
        sample = samples[0]
        if not sample.ok:
            raise AltitudeUnavailable(f"Failed to get elevation for ({lat}, {lng}): {sample.status}")
        return float(sample.elevation_m)
