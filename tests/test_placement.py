from __future__ import annotations

import json
from typing import Optional

import pytest

from geoplacement import (
    AltitudeResolver,
    AltitudeUnavailable,
    DegenerateOrientation,
    GeographicPosition,
    LocalOffset,
    OrientationStrategy,
    PlacementPipeline,
    Vector3,
)
from geoplacement.api.elevation_client import ElevationSample
from geoplacement.geom.orientation import surface_frame, surface_up
from geoplacement.geom.transforms import to_ecef

ANCHOR = GeographicPosition(37.42365071290318, -122.09213813335974, 0.0)


class _ElevationLookup:
    def __init__(self, elevation: Optional[float], status: str = "OK"):
        self.elevation = elevation
        self.status = status

    def get_elevations(self, locations):
        return [ElevationSample(lat, lng, status=self.status, elevation_m=self.elevation) for lat, lng in locations]


class _GeoidLookup:
    def __init__(self, undulation: Optional[float]):
        self.undulation = undulation

    def get_undulation(self, lat, lng):
        return self.undulation


def _resolver(elevation: Optional[float] = 8.0, undulation: Optional[float] = -32.0, status: str = "OK") -> AltitudeResolver:
    return AltitudeResolver(_ElevationLookup(elevation, status=status), _GeoidLookup(undulation))


def test_place_object_uses_anchor_altitude_by_default():
    anchor = ANCHOR.with_altitude(15.0)
    offset = LocalOffset(1.0, 2.0, 3.0)

    placement = PlacementPipeline().place_object(anchor, offset)

    expected = to_ecef(anchor, offset)
    assert placement.position == expected
    assert placement.altitude.source == "anchor"
    assert placement.altitude.ellipsoidal_m == 15.0
    assert placement.warnings == []
    assert abs(placement.orientation.norm() - 1.0) <= 1e-6


def test_place_object_precise_altitude():
    pipeline = PlacementPipeline(resolver=_resolver(8.0, -32.0))

    placement = pipeline.place_object(ANCHOR, LocalOffset.zero(), use_precise_altitude=True)

    expected = to_ecef(ANCHOR.with_altitude(-24.0), LocalOffset.zero())
    assert placement.altitude.ellipsoidal_m == pytest.approx(-24.0)
    assert placement.altitude.ground_elevation_m == 8.0
    assert placement.position.x == pytest.approx(expected.x)
    assert placement.position.y == pytest.approx(expected.y)
    assert placement.position.z == pytest.approx(expected.z)


def test_precise_placement_keeps_orientation_from_anchor_altitude():
    plain = PlacementPipeline().place_object(ANCHOR, LocalOffset.zero())
    precise = PlacementPipeline(resolver=_resolver(500.0, 0.0)).place_object(
        ANCHOR, LocalOffset.zero(), use_precise_altitude=True
    )
    assert precise.orientation == plain.orientation


def test_place_object_surfaces_geoid_warning():
    pipeline = PlacementPipeline(resolver=_resolver(8.0, None))

    placement = pipeline.place_object(ANCHOR, LocalOffset.zero(), use_precise_altitude=True)

    assert placement.altitude.ellipsoidal_m == 8.0
    assert len(placement.warnings) == 1
    assert placement.to_dict()["warnings"] == placement.warnings


def test_place_object_fails_without_position_on_elevation_error():
    pipeline = PlacementPipeline(resolver=_resolver(None, 10.0, status="REQUEST_DENIED"))
    with pytest.raises(AltitudeUnavailable, match="REQUEST_DENIED"):
        pipeline.place_object(ANCHOR, LocalOffset.zero(), use_precise_altitude=True)


def test_precise_mode_requires_resolver():
    with pytest.raises(ValueError, match="no AltitudeResolver"):
        PlacementPipeline().place_object(ANCHOR, LocalOffset.zero(), use_precise_altitude=True)


def test_place_object_at_pole_reports_degenerate_orientation():
    with pytest.raises(DegenerateOrientation):
        PlacementPipeline().place_object(GeographicPosition(90.0, 0.0, 0.0), LocalOffset.zero())


def test_pipeline_strategy_selection():
    pipeline = PlacementPipeline(strategy="radial_axis_angle")
    assert pipeline.strategy is OrientationStrategy.RADIAL_AXIS_ANGLE

    placement = pipeline.place_object(ANCHOR, LocalOffset(0.0, 0.0, 10.0))
    radial = placement.position.normalized()
    up = placement.orientation.rotate(Vector3(0.0, 0.0, 1.0))
    assert up.dot(radial) == pytest.approx(1.0, abs=1e-12)


def test_export_transform_stands_y_up_assets_on_surface():
    pipeline = PlacementPipeline()

    baked = pipeline.bake_export_transform(ANCHOR, LocalOffset(4.0, 0.0, 0.0))

    frame = surface_frame(surface_up(ANCHOR))
    model_up = baked.orientation.rotate(Vector3(0.0, 1.0, 0.0))
    model_forward = baked.orientation.rotate(Vector3(0.0, 0.0, 1.0))
    assert model_up.dot(frame.up) == pytest.approx(1.0, abs=1e-9)
    assert model_forward.dot(frame.north) == pytest.approx(-1.0, abs=1e-9)
    assert abs(baked.orientation.norm() - 1.0) <= 1e-9
    # no resolver configured: anchor altitude is kept
    assert baked.altitude.source == "anchor"


def test_export_transform_defaults_to_precise_altitude_with_resolver():
    baked = PlacementPipeline(resolver=_resolver(8.0, -32.0)).bake_export_transform(ANCHOR, LocalOffset.zero())
    assert baked.altitude.source == "precise"
    assert baked.altitude.ellipsoidal_m == pytest.approx(-24.0)


def test_local_to_geographic_readback():
    pos = PlacementPipeline().local_to_geographic(Vector3(6378137.0 + 5.0, 0.0, 0.0))
    assert pos.latitude_deg == pytest.approx(0.0)
    assert pos.longitude_deg == pytest.approx(0.0)
    assert pos.altitude_m == pytest.approx(5.0)


def test_placement_to_dict_is_json_serialisable():
    placement = PlacementPipeline().place_object(ANCHOR, LocalOffset(1.0, 1.0, 1.0))
    data = json.loads(json.dumps(placement.to_dict()))

    assert set(data) == {"position", "orientation", "altitude", "warnings"}
    assert set(data["orientation"]) == {"x", "y", "z", "w"}
    assert data["position"]["x"] == pytest.approx(placement.position.x)
