"""
Shared dataclasses and small vector/quaternion value types.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np


def _finite(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {number}")
    return number


@dataclass(frozen=True)
class Vector3:
    """Immutable 3-vector in meters (or unitless for directions)."""

    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        for name in ("x", "y", "z"):
            object.__setattr__(self, name, _finite(name, getattr(self, name)))

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vector3:
        n = self.length()
        if n == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vector3(self.x / n, self.y / n, self.z / n)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_array(cls, arr: Sequence[float]) -> Vector3:
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))


@dataclass(frozen=True)
class LocalOffset(Vector3):
    """Offset in the anchor's local right-handed frame, meters."""

    @staticmethod
    def zero() -> LocalOffset:
        return LocalOffset(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class EcefPosition(Vector3):
    """Earth-Centered-Earth-Fixed position, meters."""


@dataclass(frozen=True)
class GeographicPosition:
    """Latitude/longitude in degrees, altitude in meters above the ellipsoid."""

    latitude_deg: float
    longitude_deg: float
    altitude_m: float = 0.0

    def __post_init__(self) -> None:
        lat = _finite("latitude_deg", self.latitude_deg)
        lng = _finite("longitude_deg", self.longitude_deg)
        alt = _finite("altitude_m", self.altitude_m)
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"Latitude {lat} outside [-90, 90]")
        if not -180.0 <= lng <= 180.0:
            raise ValueError(f"Longitude {lng} outside [-180, 180]")
        object.__setattr__(self, "latitude_deg", lat)
        object.__setattr__(self, "longitude_deg", lng)
        object.__setattr__(self, "altitude_m", alt)

    def with_altitude(self, altitude_m: float) -> GeographicPosition:
        return replace(self, altitude_m=altitude_m)

    def to_dict(self) -> Dict[str, float]:
        return {
            "lat": self.latitude_deg,
            "lng": self.longitude_deg,
            "altitude": self.altitude_m,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> GeographicPosition:
        if data.get("lat") is None or data.get("lng") is None:
            raise ValueError("GeographicPosition requires lat and lng")
        return GeographicPosition(
            latitude_deg=float(data["lat"]),
            longitude_deg=float(data["lng"]),
            altitude_m=float(data.get("altitude") or 0.0),
        )


@dataclass(frozen=True)
class SurfaceFrame:
    """Orthonormal east/north/up basis at a point near the ellipsoid."""

    up: Vector3
    north: Vector3
    east: Vector3

    def as_matrix(self) -> np.ndarray:
        """Rotation matrix with columns [east, north, up]."""
        return np.column_stack([self.east.to_array(), self.north.to_array(), self.up.to_array()])


@dataclass(frozen=True)
class Quaternion:
    """Rotation quaternion stored as (x, y, z, w)."""

    x: float
    y: float
    z: float
    w: float

    @staticmethod
    def identity() -> Quaternion:
        return Quaternion(0.0, 0.0, 0.0, 1.0)

    @staticmethod
    def from_axis_angle(axis: Vector3, angle_rad: float) -> Quaternion:
        a = axis.normalized()
        s = math.sin(angle_rad / 2.0)
        return Quaternion(a.x * s, a.y * s, a.z * s, math.cos(angle_rad / 2.0))

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w)

    def normalized(self) -> Quaternion:
        n = self.norm()
        if n == 0.0:
            raise ValueError("Cannot normalize a zero quaternion")
        return Quaternion(self.x / n, self.y / n, self.z / n, self.w / n)

    def __mul__(self, other: Quaternion) -> Quaternion:
        """Hamilton product; ``a * b`` applies ``b`` first, then ``a``."""
        ax, ay, az, aw = self.x, self.y, self.z, self.w
        bx, by, bz, bw = other.x, other.y, other.z, other.w
        return Quaternion(
            ax * bw + aw * bx + ay * bz - az * by,
            ay * bw + aw * by + az * bx - ax * bz,
            az * bw + aw * bz + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        )

    def rotate(self, v: Vector3) -> Vector3:
        u = Vector3(self.x, self.y, self.z)
        t = u.cross(v) * 2.0
        return v + t * self.w + u.cross(t)

    def as_rotation_matrix(self) -> np.ndarray:
        q = self.normalized()
        x, y, z, w = q.x, q.y, q.z, q.w
        return np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
                [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
                [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
            ],
            dtype=np.float64,
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z, "w": self.w}


@dataclass
class AltitudeSample:
    """Altitude fed to the ECEF transform and where it came from."""

    ellipsoidal_m: float
    source: str  # "anchor" | "precise"
    ground_elevation_m: Optional[float] = None
    geoid_undulation_m: Optional[float] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ellipsoidal_m": float(self.ellipsoidal_m),
            "source": self.source,
            "ground_elevation_m": self.ground_elevation_m,
            "geoid_undulation_m": self.geoid_undulation_m,
            "warnings": list(self.warnings),
        }


@dataclass
class Placement:
    """World-space transform for a placed object."""

    position: EcefPosition
    orientation: Quaternion
    altitude: AltitudeSample
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position.to_dict(),
            "orientation": self.orientation.to_dict(),
            "altitude": self.altitude.to_dict(),
            "warnings": list(self.warnings),
        }


def parse_location(text: str) -> Tuple[float, float]:
    """Parse a ``"lat, lng"`` string as typed into a location box."""
    parts = [p.strip() for p in str(text).split(",")]
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Expected 'lat, lng', got {text!r}")
    lat = _finite("latitude", parts[0])
    lng = _finite("longitude", parts[1])
    return lat, lng


def parse_offset(text: str) -> LocalOffset:
    """Parse an ``"x,y,z"`` string into a LocalOffset."""
    parts = [p.strip() for p in str(text).split(",")]
    if len(parts) != 3:
        raise ValueError(f"Expected 'x,y,z', got {text!r}")
    return LocalOffset(*(_finite(name, p) for name, p in zip("xyz", parts)))
