"""Geodetic placement of 3D scene objects.

Converts an object's offset from a geographic anchor into an ECEF position
and a surface-aligned orientation, optionally resolving a precise altitude
from ground elevation and geoid undulation services.
"""
from __future__ import annotations

from .altitude import AltitudeResolver, AltitudeUnavailable
from .common_core import (
    AltitudeSample,
    EcefPosition,
    GeographicPosition,
    LocalOffset,
    Placement,
    Quaternion,
    SurfaceFrame,
    Vector3,
)
from .geom.orientation import DegenerateOrientation, OrientationStrategy
from .placement import PlacementPipeline

__all__ = [
    "AltitudeResolver",
    "AltitudeUnavailable",
    "AltitudeSample",
    "DegenerateOrientation",
    "EcefPosition",
    "GeographicPosition",
    "LocalOffset",
    "OrientationStrategy",
    "Placement",
    "PlacementPipeline",
    "Quaternion",
    "SurfaceFrame",
    "Vector3",
]
