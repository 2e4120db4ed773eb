"""Tests for great-circle distance helpers."""

import pytest

from backend.reflow.models.common import Coordinate
from backend.reflow.planning.geo import EARTH_RADIUS_KM, distance_km, path_length_km

PARIS = Coordinate(lat=48.8566, lng=2.3522)
LONDON = Coordinate(lat=51.5074, lng=-0.1278)


def test_distance_to_self_is_zero() -> None:
    """Test that a point is zero kilometers from itself."""
    assert distance_km(PARIS, PARIS) == 0.0


def test_distance_paris_london() -> None:
    """Test a well-known city pair (~343 km)."""
    assert distance_km(PARIS, LONDON) == pytest.approx(343.5, abs=1.5)


def test_distance_is_symmetric() -> None:
    """Test that distance does not depend on argument order."""
    assert distance_km(PARIS, LONDON) == pytest.approx(distance_km(LONDON, PARIS))


def test_one_degree_of_latitude() -> None:
    """Test that one degree along a meridian matches R * pi / 180."""
    expected = EARTH_RADIUS_KM * 3.141592653589793 / 180
    d = distance_km(Coordinate(lat=0, lng=0), Coordinate(lat=1, lng=0))
    assert d == pytest.approx(expected, rel=1e-9)


def test_antipodal_points() -> None:
    """Test that antipodes are half the circumference apart."""
    d = distance_km(Coordinate(lat=0, lng=0), Coordinate(lat=0, lng=180))
    assert d == pytest.approx(EARTH_RADIUS_KM * 3.141592653589793, rel=1e-9)


def test_path_length_sums_legs() -> None:
    """Test that path length is the sum of consecutive legs."""
    a = Coordinate(lat=0, lng=0)
    b = Coordinate(lat=0, lng=1)
    c = Coordinate(lat=1, lng=1)

    assert path_length_km([a, b, c]) == pytest.approx(distance_km(a, b) + distance_km(b, c))


def test_path_length_of_short_paths_is_zero() -> None:
    """Test empty and single-point paths."""
    assert path_length_km([]) == 0
    assert path_length_km([PARIS]) == 0
