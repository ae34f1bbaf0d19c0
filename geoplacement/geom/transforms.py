"""
Local frame <-> ECEF conversions.

`to_ecef` places the anchor on the ellipsoid and adds the local offset
component-wise, i.e. the offset axes are taken as already aligned with ECEF
at the anchor. The rotation into the tangent frame is applied to the placed
object (see `orientation.compute_orientation`), never to the offset.
"""
from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Optional

from .. import constants
from ..altitude import AltitudeResolver
from ..common_core import EcefPosition, GeographicPosition, LocalOffset, Vector3
from .ellipsoid import WGS84, Ellipsoid

log = logging.getLogger(__name__)


def to_ecef(
    anchor: GeographicPosition,
    offset: LocalOffset,
    use_precise_altitude: bool = False,
    resolver: Optional[AltitudeResolver] = None,
    ellipsoid: Ellipsoid = WGS84,
) -> EcefPosition:
    """Convert an anchor plus local offset into an ECEF position.

    Parameters
    ----------
    anchor:
        Origin of the local frame. Its altitude is used verbatim unless
        *use_precise_altitude* is set.
    offset:
        Local offset in meters, added directly to the anchor's ECEF position.
    use_precise_altitude:
        Replace the anchor altitude with ground elevation + geoid undulation
        from *resolver*. Raises `AltitudeUnavailable` when the elevation
        lookup fails.
    """
    if use_precise_altitude:
        if resolver is None:
            raise ValueError("Precise altitude requested but no AltitudeResolver was provided")
        h = resolver.resolve_precise_altitude(anchor.latitude_deg, anchor.longitude_deg)
    else:
        h = anchor.altitude_m
    log.debug("Adjusted altitude: %.3f m", h)

    x0, y0, z0 = ellipsoid.geodetic_to_ecef(anchor.latitude_deg, anchor.longitude_deg, h)
    return EcefPosition(x0 + offset.x, y0 + offset.y, z0 + offset.z)


def local_to_geographic(
    local_position: Vector3,
    earth_radius_m: float = constants.SPHERICAL_EARTH_RADIUS_M,
) -> GeographicPosition:
    """Coarse spherical readback of an Earth-centered vector.

    Only suitable for display: latitude is geocentric and the altitude is
    measured against a sphere, so it can be off by kilometers away from the
    equator. Use `ecef_to_geographic` when the value feeds back into a
    placement.
    """
    x, y, z = local_position.x, local_position.y, local_position.z
    lat = math.degrees(math.atan2(z, math.hypot(x, y)))
    lng = math.degrees(math.atan2(y, x))
    altitude = local_position.length() - earth_radius_m
    return GeographicPosition(latitude_deg=lat, longitude_deg=lng, altitude_m=altitude)


@lru_cache(maxsize=1)
def _ecef_to_llh_transformer():
    try:
        from pyproj import Transformer
    except ImportError as e:
        raise RuntimeError("pyproj is required for ecef_to_geographic") from e
    return Transformer.from_crs("EPSG:4978", "EPSG:4979", always_xy=True)


def ecef_to_geographic(position: Vector3) -> GeographicPosition:
    """Exact ellipsoidal inverse of the anchor placement (WGS84)."""
    lon, lat, h = _ecef_to_llh_transformer().transform(position.x, position.y, position.z)
    return GeographicPosition(latitude_deg=float(lat), longitude_deg=float(lon), altitude_m=float(h))
