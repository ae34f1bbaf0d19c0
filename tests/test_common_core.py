from __future__ import annotations

import math

import numpy as np
import pytest

from geoplacement.common_core import (
    AltitudeSample,
    EcefPosition,
    GeographicPosition,
    LocalOffset,
    Quaternion,
    Vector3,
    parse_location,
    parse_offset,
)


def test_vector_operations():
    a = Vector3(1.0, 0.0, 0.0)
    b = Vector3(0.0, 1.0, 0.0)

    assert a.cross(b) == Vector3(0.0, 0.0, 1.0)
    assert a.dot(b) == 0.0
    assert (a + b) * 2.0 == Vector3(2.0, 2.0, 0.0)
    assert Vector3(3.0, 4.0, 0.0).length() == 5.0
    assert Vector3(0.0, 0.0, -7.0).normalized() == Vector3(0.0, 0.0, -1.0)
    np.testing.assert_array_equal(EcefPosition(1.0, 2.0, 3.0).to_array(), [1.0, 2.0, 3.0])


def test_vector_rejects_non_finite_and_zero_normalize():
    with pytest.raises(ValueError, match="finite"):
        LocalOffset(float("inf"), 0.0, 0.0)
    with pytest.raises(ValueError, match="number"):
        LocalOffset("east", 0.0, 0.0)
    with pytest.raises(ValueError, match="zero-length"):
        Vector3(0.0, 0.0, 0.0).normalized()


def test_geographic_position_validation_and_immutability():
    pos = GeographicPosition(10, -20, 5)
    assert isinstance(pos.latitude_deg, float)
    with pytest.raises(AttributeError):
        pos.latitude_deg = 11.0  # type: ignore[misc]

    for lat, lng in [(90.5, 0.0), (-91.0, 0.0), (0.0, 180.5), (float("nan"), 0.0)]:
        with pytest.raises(ValueError):
            GeographicPosition(lat, lng, 0.0)


def test_geographic_position_dict_round_trip():
    pos = GeographicPosition(37.4, -122.1, 12.0)
    assert GeographicPosition.from_dict(pos.to_dict()) == pos
    assert GeographicPosition.from_dict({"lat": 1, "lng": 2}).altitude_m == 0.0
    with pytest.raises(ValueError, match="lat and lng"):
        GeographicPosition.from_dict({"lat": 1.0})


def test_quaternion_axis_angle_and_product():
    quarter_z = Quaternion.from_axis_angle(Vector3(0.0, 0.0, 2.0), math.pi / 2)
    rotated = quarter_z.rotate(Vector3(1.0, 0.0, 0.0))
    np.testing.assert_allclose(rotated.to_array(), [0.0, 1.0, 0.0], atol=1e-12)

    half_z = quarter_z * quarter_z
    np.testing.assert_allclose(half_z.rotate(Vector3(1.0, 0.0, 0.0)).to_array(), [-1.0, 0.0, 0.0], atol=1e-12)

    quarter_x = Quaternion.from_axis_angle(Vector3(1.0, 0.0, 0.0), math.pi / 2)
    # right-hand factor applies first
    composed = quarter_z * quarter_x
    np.testing.assert_allclose(composed.rotate(Vector3(0.0, 1.0, 0.0)).to_array(), [0.0, 0.0, 1.0], atol=1e-12)
    np.testing.assert_allclose(composed.as_rotation_matrix() @ [0.0, 1.0, 0.0], [0.0, 0.0, 1.0], atol=1e-12)


def test_quaternion_normalized():
    q = Quaternion(0.0, 0.0, 0.0, 2.0).normalized()
    assert q == Quaternion.identity()
    with pytest.raises(ValueError):
        Quaternion(0.0, 0.0, 0.0, 0.0).normalized()


def test_altitude_sample_to_dict():
    sample = AltitudeSample(ellipsoidal_m=-2.5, source="precise", ground_elevation_m=30.0, geoid_undulation_m=-32.5)
    assert sample.to_dict() == {
        "ellipsoidal_m": -2.5,
        "source": "precise",
        "ground_elevation_m": 30.0,
        "geoid_undulation_m": -32.5,
        "warnings": [],
    }


def test_parse_location():
    assert parse_location("37.42365071290318, -122.09213813335974") == (37.42365071290318, -122.09213813335974)
    assert parse_location(" 1 ,2 ") == (1.0, 2.0)
    for bad in ["", "37.4", "1,2,3", "north, west", "1, "]:
        with pytest.raises(ValueError):
            parse_location(bad)


def test_parse_offset():
    assert parse_offset("1, -2.5, 3") == LocalOffset(1.0, -2.5, 3.0)
    with pytest.raises(ValueError):
        parse_offset("1,2")
