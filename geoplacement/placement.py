"""
Placement orchestration: ECEF position + orientation for a scene object.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from . import constants
from .altitude import AltitudeResolver
from .common_core import AltitudeSample, GeographicPosition, LocalOffset, Placement, Quaternion, Vector3
from .geom.ellipsoid import WGS84, Ellipsoid
from .geom.orientation import OrientationStrategy, compute_orientation
from .geom.transforms import local_to_geographic, to_ecef

log = logging.getLogger(__name__)

_EXPORT_AXIS = Vector3(1.0, 0.0, 0.0)


class PlacementPipeline:
    """Compose altitude resolution, the ECEF transform and surface orientation.

    *resolver* is only required for precise-altitude placements. It is built
    once by the owner of the pipeline and reused for every call.
    """

    def __init__(
        self,
        resolver: Optional[AltitudeResolver] = None,
        ellipsoid: Ellipsoid = WGS84,
        strategy: Union[OrientationStrategy, str] = constants.ORIENTATION_STRATEGY,
        normal_sample_offset_m: float = constants.NORMAL_SAMPLE_OFFSET_M,
    ):
        self.resolver = resolver
        self.ellipsoid = ellipsoid
        self.strategy = OrientationStrategy(strategy)
        self.normal_sample_offset_m = float(normal_sample_offset_m)

    def place_object(
        self,
        anchor: GeographicPosition,
        offset: LocalOffset,
        use_precise_altitude: bool = False,
    ) -> Placement:
        """Return the ECEF position and orientation of an object at *offset* from *anchor*.

        Raises `AltitudeUnavailable` in precise mode when ground elevation
        cannot be fetched, and `DegenerateOrientation` at the poles.
        """
        altitude = self._altitude(anchor, use_precise_altitude)
        position = to_ecef(anchor.with_altitude(altitude.ellipsoidal_m), offset, ellipsoid=self.ellipsoid)
        orientation = compute_orientation(
            anchor,
            offset,
            strategy=self.strategy,
            sample_offset_m=self.normal_sample_offset_m,
            ellipsoid=self.ellipsoid,
        )
        log.debug("Placed object at %s with orientation %s", position, orientation)
        return Placement(
            position=position,
            orientation=orientation,
            altitude=altitude,
            warnings=list(altitude.warnings),
        )

    def bake_export_transform(
        self,
        anchor: GeographicPosition,
        offset: LocalOffset,
        use_precise_altitude: Optional[bool] = None,
    ) -> Placement:
        """World transform to bake into an exported asset.

        Uses precise altitude whenever a resolver is configured, unless told
        otherwise, and turns the orientation a quarter turn about +X so that
        Y-up assets stand on the surface.
        """
        if use_precise_altitude is None:
            use_precise_altitude = self.resolver is not None
        placement = self.place_object(anchor, offset, use_precise_altitude=use_precise_altitude)
        correction = Quaternion.from_axis_angle(_EXPORT_AXIS, constants.EXPORT_UP_AXIS_CORRECTION_RAD)
        placement.orientation = (placement.orientation * correction).normalized()
        return placement

    def local_to_geographic(self, local_position: Vector3) -> GeographicPosition:
        """Approximate display-only readback; see `geom.transforms.local_to_geographic`."""
        return local_to_geographic(local_position)

    def _altitude(self, anchor: GeographicPosition, use_precise_altitude: bool) -> AltitudeSample:
        if not use_precise_altitude:
            return AltitudeSample(ellipsoidal_m=anchor.altitude_m, source="anchor")
        if self.resolver is None:
            raise ValueError("Precise altitude requested but the pipeline has no AltitudeResolver")
        return self.resolver.resolve(anchor.latitude_deg, anchor.longitude_deg)
