"""Ellipsoid math, local/ECEF transforms and surface orientation."""

from .ellipsoid import WGS84, Ellipsoid
from .orientation import DegenerateOrientation, OrientationStrategy, compute_orientation, surface_frame, surface_up
from .transforms import ecef_to_geographic, local_to_geographic, to_ecef

__all__ = [
    "WGS84",
    "Ellipsoid",
    "DegenerateOrientation",
    "OrientationStrategy",
    "compute_orientation",
    "surface_frame",
    "surface_up",
    "ecef_to_geographic",
    "local_to_geographic",
    "to_ecef",
]
