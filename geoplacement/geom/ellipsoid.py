"""Reference ellipsoid parameters and the geodetic -> ECEF formula."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .. import constants


@dataclass(frozen=True)
class Ellipsoid:
    """Oblate ellipsoid described by its equatorial radius and flattening."""

    a: float
    f: float

    @property
    def b(self) -> float:
        """Polar radius."""
        return self.a * (1.0 - self.f)

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return (self.a * self.a - self.b * self.b) / (self.a * self.a)

    def prime_vertical_radius(self, phi: float) -> float:
        """Radius of curvature in the prime vertical at geodetic latitude *phi* (radians)."""
        return self.a / math.sqrt(1.0 - self.e2 * math.sin(phi) ** 2)

    def geodetic_to_ecef(self, lat_deg: float, lng_deg: float, height_m: float) -> np.ndarray:
        phi = math.radians(lat_deg)
        lam = math.radians(lng_deg)
        n = self.prime_vertical_radius(phi)
        cos_phi = math.cos(phi)
        x = (n + height_m) * cos_phi * math.cos(lam)
        y = (n + height_m) * cos_phi * math.sin(lam)
        z = ((1.0 - self.e2) * n + height_m) * math.sin(phi)
        return np.array([x, y, z], dtype=np.float64)


WGS84 = Ellipsoid(a=constants.WGS84_A, f=constants.WGS84_F)
