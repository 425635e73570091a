import math

import numpy as np
import pytest

from paleolatitude import geomath
from paleolatitude.euler import EulerPoleEntry
from paleolatitude.apwp import APWPEntry
from paleolatitude.exceptions import GeometryConsistencyError
from paleolatitude.geomath import INVALID_LATITUDE
from paleolatitude.plates import Coordinate

from conftest import cape_town


@pytest.mark.parametrize(
    "a,b,expected",
    [
        (1.0, 1.0, True),
        (0.0, 1e-11, True),
        (1e12, 1e12 + 1e-3, True),  # relative error
        (1.0, 1.0 + 1e-6, False),
        (0.0, 1e-9, False),
    ],
)
def test_double_eq(a, b, expected):
    assert geomath.double_eq(a, b) == expected, f"double_eq({a}, {b}) should be {expected}"


@pytest.mark.parametrize("lat,lon", [(90, 0), (0, 0), (-45, 120), (12.5, -170.3)])
def test_euler_basis_is_orthonormal(lat, lon):
    theta_e, phi_e, r_e = geomath.euler_basis(lat, lon)
    basis = np.column_stack((theta_e, phi_e, r_e))
    assert np.allclose(basis.T @ basis, np.eye(3)), "Euler pole basis not orthonormal"
    # r_e points at the Euler pole
    x, y, z = r_e
    assert math.isclose(math.degrees(math.asin(z)), lat, abs_tol=1e-9)


def test_unit_length_check():
    with pytest.raises(GeometryConsistencyError):
        geomath._check_unit_length("test", np.array([1.0, 1.0, 0.0]))


@pytest.mark.parametrize("pole", [(60, 30), (-20, 200), (89, 10)])
def test_zero_rotation_is_identity(pole):
    rotated = geomath.rotate_pole_through_euler(Coordinate(*pole), 10, 20, 0)
    assert math.isclose(rotated.latitude, pole[0], abs_tol=1e-9), "Latitude changed by zero rotation"
    assert math.isclose(rotated.longitude % 360, pole[1] % 360, abs_tol=1e-9), "Longitude changed by zero rotation"


def test_rotation_about_north_pole():
    # rotating about the z axis only changes the longitude (by -rotation)
    rotated = geomath.rotate_pole_through_euler(Coordinate(60, 30), 90, 0, 10)
    assert math.isclose(rotated.latitude, 60, abs_tol=1e-9)
    assert math.isclose(rotated.longitude, 20, abs_tol=1e-9)


def test_rotation_about_x_axis():
    rotated = geomath.rotate_pole_through_euler(Coordinate(90, 0), 0, 0, 90)
    assert math.isclose(rotated.latitude, 0, abs_tol=1e-9)
    assert math.isclose(rotated.longitude, 90, abs_tol=1e-9)


def test_rotated_longitude_range():
    for rotation in range(-180, 181, 15):
        rotated = geomath.rotate_pole_through_euler(Coordinate(30, 45), 20, -60, rotation)
        assert 0 <= rotated.longitude <= 360, f"Longitude {rotated.longitude} out of [0, 360]"
        assert -90 <= rotated.latitude <= 90


@pytest.mark.parametrize(
    "site,pole,expected",
    [
        ((40, 10), (80, 10), 50),
        ((0, 0), (90, 0), 0),
        (cape_town, (90, 0), cape_town[0]),
        ((10, 20), (10, 20), 90),  # site at the pole
        ((-10, 200), (10, 20), -90),  # site at the antipode of the pole
    ],
)
def test_compute_paleolatitude(site, pole, expected):
    palat = geomath.compute_paleolatitude(Coordinate(*site), Coordinate(*pole))
    assert math.isclose(palat, expected, abs_tol=1e-5), f"Expected paleolatitude {expected}, got {palat}"


def test_uncertainty_bounds_at_equator():
    palat_min, palat_max = geomath.compute_uncertainty_bounds(0.0, 4.0)
    assert math.isclose(palat_min, -palat_max, abs_tol=1e-12)
    assert 3.9 < palat_max < 4.1


def test_uncertainty_bounds_enclose_paleolatitude():
    for palat in [-60, -30, -5, 5, 30, 60]:
        palat_min, palat_max = geomath.compute_uncertainty_bounds(palat, 3.0)
        assert palat_min < palat < palat_max, f"Bounds [{palat_min}, {palat_max}] do not enclose {palat}"


@pytest.mark.parametrize("a95", [0.0, 1e-8, 1e-7])
def test_no_uncertainty_data(a95):
    assert geomath.compute_uncertainty_bounds(30, a95) == (INVALID_LATITUDE, INVALID_LATITUDE)


def test_pole_crossing_south():
    assert geomath.correct_pole_crossing(-80, 85, -70) == (-90, -70)


def test_pole_crossing_north():
    assert geomath.correct_pole_crossing(80, 70, -85) == (70, 90)


def test_no_pole_crossing():
    assert geomath.correct_pole_crossing(30, 25, 35) == (25, 35)


def test_bounds_over_north_pole():
    palat_min, palat_max = geomath.compute_uncertainty_bounds(85, 8)
    assert palat_max < 85, "Upper bound expected to wrap over the north pole"
    palat_min, palat_max = geomath.correct_pole_crossing(85, palat_min, palat_max)
    assert palat_max == 90
    assert palat_min < 85


def test_compute_paleolatitude_range():
    euler_entry = EulerPoleEntry(701, 10, 0.0, 0.0, 0.0, 701)
    apwp_entry = APWPEntry(701, 10, 2.1, 89.7, 15.0)
    palat_min, palat, palat_max = geomath.compute_paleolatitude_range(
        Coordinate(*cape_town), euler_entry, apwp_entry
    )
    expected = geomath.compute_paleolatitude(Coordinate(*cape_town), Coordinate(89.7, 15.0))
    assert math.isclose(palat, expected, abs_tol=1e-6)
    assert palat_min < palat < palat_max

    no_a95 = apwp_entry._replace(a95=0.0)
    palat_min, _, palat_max = geomath.compute_paleolatitude_range(
        Coordinate(*cape_town), euler_entry, no_a95
    )
    assert palat_min == INVALID_LATITUDE and palat_max == INVALID_LATITUDE
