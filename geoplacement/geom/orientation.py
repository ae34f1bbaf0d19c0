"""
Orientation of a placed object relative to the local surface.

Two strategies are available:

- ``tangent_frame`` (default): finite-difference ellipsoid normal, east/north
  built from the polar axis, rotation matrix ``[east, north, up]`` converted
  to a quaternion. Respects the ellipsoid.
- ``radial_axis_angle``: shortest-arc rotation from +Z to the geocentric
  direction of the object's ECEF position. Equal to the tangent frame
  only on a sphere.

Neither handles the poles. The tangent frame is undefined there and
`DegenerateOrientation` is raised instead of returning NaNs.
"""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Union

import numpy as np

from .. import constants
from ..common_core import GeographicPosition, LocalOffset, Quaternion, SurfaceFrame, Vector3
from .ellipsoid import WGS84, Ellipsoid
from .transforms import to_ecef

log = logging.getLogger(__name__)

POLAR_AXIS = Vector3(0.0, 0.0, 1.0)
REFERENCE_UP = Vector3(0.0, 0.0, 1.0)


class DegenerateOrientation(ValueError):
    """Raised when a surface frame cannot be built (poles, zero vectors, NaNs)."""


class OrientationStrategy(str, Enum):
    TANGENT_FRAME = "tangent_frame"
    RADIAL_AXIS_ANGLE = "radial_axis_angle"


def _unit(v: np.ndarray, what: str) -> Vector3:
    n = float(np.linalg.norm(v))
    if not np.all(np.isfinite(v)) or not math.isfinite(n) or n == 0.0:
        raise DegenerateOrientation(f"Cannot normalize {what}: {v}")
    return Vector3.from_array(v / n)


def surface_up(
    anchor: GeographicPosition,
    sample_offset_m: float = constants.NORMAL_SAMPLE_OFFSET_M,
    ellipsoid: Ellipsoid = WGS84,
) -> Vector3:
    """Local up direction at *anchor*, sampled *sample_offset_m* along the vertical."""
    low = to_ecef(anchor, LocalOffset.zero(), ellipsoid=ellipsoid)
    high = to_ecef(anchor.with_altitude(anchor.altitude_m + sample_offset_m), LocalOffset.zero(), ellipsoid=ellipsoid)
    return _unit(high.to_array() - low.to_array(), "surface normal")


def surface_frame(up: Vector3) -> SurfaceFrame:
    east_raw = POLAR_AXIS.cross(up)
    if not math.isfinite(east_raw.length()) or east_raw.length() < constants.POLE_CROSS_NORM_MIN:
        raise DegenerateOrientation(f"Up vector {up} is parallel to the polar axis; no east direction at the poles")
    east = east_raw.normalized()
    north = up.cross(east).normalized()
    return SurfaceFrame(up=up, north=north, east=east)


def rotation_matrix_to_quaternion(m: np.ndarray) -> Quaternion:
    """Convert a 3x3 rotation matrix to a unit quaternion.

    Uses Shepperd's method: branch on the largest of the trace and the
    diagonal so the square root argument never approaches zero.
    """
    m = np.asarray(m, dtype=np.float64)
    if m.shape != (3, 3):
        raise ValueError(f"Expected 3x3 matrix, got shape {m.shape}")
    if not np.all(np.isfinite(m)):
        raise DegenerateOrientation("Rotation matrix contains non-finite values")

    trace = float(np.trace(m))
    if trace > 0:
        s = 0.5 / math.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (m[2, 1] - m[1, 2]) * s
        y = (m[0, 2] - m[2, 0]) * s
        z = (m[1, 0] - m[0, 1]) * s
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        w = (m[2, 1] - m[1, 2]) / s
        x = 0.25 * s
        y = (m[0, 1] + m[1, 0]) / s
        z = (m[0, 2] + m[2, 0]) / s
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        w = (m[0, 2] - m[2, 0]) / s
        x = (m[0, 1] + m[1, 0]) / s
        y = 0.25 * s
        z = (m[1, 2] + m[2, 1]) / s
    else:
        s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        w = (m[1, 0] - m[0, 1]) / s
        x = (m[0, 2] + m[2, 0]) / s
        y = (m[1, 2] + m[2, 1]) / s
        z = 0.25 * s

    return Quaternion(float(x), float(y), float(z), float(w)).normalized()


def quaternion_between(v_from: Vector3, v_to: Vector3) -> Quaternion:
    """Shortest-arc rotation taking unit vector *v_from* onto unit vector *v_to*."""
    r = v_from.dot(v_to) + 1.0
    if r < 1e-12:
        # Opposite vectors: rotate half a turn about any perpendicular axis.
        if abs(v_from.x) > abs(v_from.z):
            q = Quaternion(-v_from.y, v_from.x, 0.0, 0.0)
        else:
            q = Quaternion(0.0, -v_from.z, v_from.y, 0.0)
    else:
        c = v_from.cross(v_to)
        q = Quaternion(c.x, c.y, c.z, r)
    return q.normalized()


def _tangent_frame_orientation(anchor: GeographicPosition, sample_offset_m: float, ellipsoid: Ellipsoid) -> Quaternion:
    up = surface_up(anchor, sample_offset_m=sample_offset_m, ellipsoid=ellipsoid)
    frame = surface_frame(up)
    return rotation_matrix_to_quaternion(frame.as_matrix())


def _radial_orientation(anchor: GeographicPosition, offset: LocalOffset, ellipsoid: Ellipsoid) -> Quaternion:
    position = to_ecef(anchor, offset, ellipsoid=ellipsoid)
    radial = _unit(position.to_array(), "ECEF position")
    return quaternion_between(REFERENCE_UP, radial)


def compute_orientation(
    anchor: GeographicPosition,
    offset: LocalOffset,
    strategy: Union[OrientationStrategy, str] = constants.ORIENTATION_STRATEGY,
    sample_offset_m: float = constants.NORMAL_SAMPLE_OFFSET_M,
    ellipsoid: Ellipsoid = WGS84,
) -> Quaternion:
    """Quaternion taking the object's X/Y/Z axes to east/north/up at *anchor*.

    The tangent-frame strategy samples the normal at the anchor itself, so
    *offset* only affects the radial strategy, which constrains Z alone.
    """
    strategy = OrientationStrategy(strategy)
    if strategy is OrientationStrategy.TANGENT_FRAME:
        quat = _tangent_frame_orientation(anchor, sample_offset_m, ellipsoid)
    else:
        quat = _radial_orientation(anchor, offset, ellipsoid)

    if not all(math.isfinite(c) for c in (quat.x, quat.y, quat.z, quat.w)):
        raise DegenerateOrientation(f"Orientation at {anchor} is not finite: {quat}")
    log.debug("Orientation (%s) at %s: %s", strategy.value, anchor, quat)
    return quat
