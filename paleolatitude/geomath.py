#
#    Copyright (C) 2024-2025 The University of Sydney, Australia
#
#    This program is free software; you can redistribute it and/or modify it under
#    the terms of the GNU General Public License, version 2, as published by
#    the Free Software Foundation.
#
#    This program is distributed in the hope that it will be useful, but WITHOUT
#    ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
#    FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License
#    for more details.
#
#    You should have received a copy of the GNU General Public License along
#    with this program; if not, write to Free Software Foundation, Inc.,
#    51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.
#
import logging
import math

import numpy as np

from .exceptions import GeometryConsistencyError
from .plates import Coordinate

logger = logging.getLogger("paleolatitude")

#
# the spherical trigonometry used to turn an Euler rotation and a reference pole into a paleolatitude
#

# absolute (or relative) tolerance of double_eq()
DOUBLE_COMPARISON_EPSILON = 1e-10

# sentinel value of a missing latitude (e.g. no uncertainty bounds available)
INVALID_LATITUDE = -99999

# an A95 at or below this value means "no uncertainty data"
A95_THRESHOLD = 1e-7


def deg2rad(deg):
    return (deg * math.pi) / 180.0


def rad2deg(rad):
    return rad * (180.0 / math.pi)


def double_eq(a, b, epsilon=DOUBLE_COMPARISON_EPSILON):
    """compare two floats with an absolute tolerance, falling back to a relative one

    :param a: a float number
    :param b: a float number
    :param epsilon: the tolerance

    :returns: True if a and b are considered equal
    """
    if a == b:
        return True
    diff = abs(a - b)
    if diff <= epsilon:
        return True
    # abs(a) + abs(b) > 0 here
    return diff / (abs(a) + abs(b)) < epsilon


def _check_unit_length(name, vector):
    length = math.sqrt(float(np.dot(vector, vector)))
    if not double_eq(length, 1.0):
        raise GeometryConsistencyError(
            f"Consistency check failed: square root of squared sums of {name}[] vector elements "
            f"does not equal 1, but {length}?"
        )


def euler_basis(latitude, longitude):
    """return the local basis (theta_e, phi_e, r_e) of an Euler pole.
    r_e is the rotation axis, theta_e and phi_e span the tangent plane at the pole.

    :param latitude: Euler pole latitude in degrees
    :param longitude: Euler pole longitude in degrees

    :returns: three unit vectors as numpy arrays
    """
    theta = deg2rad(90 - latitude)  # colatitude
    phi = deg2rad(longitude)

    theta_e = np.array(
        [math.cos(phi) * math.cos(theta), math.sin(phi) * math.cos(theta), -math.sin(theta)]
    )
    phi_e = np.array([-math.sin(phi), math.cos(phi), 0.0])
    r_e = np.array(
        [math.cos(phi) * math.sin(theta), math.sin(phi) * math.sin(theta), math.cos(theta)]
    )

    _check_unit_length("θ_E", theta_e)
    _check_unit_length("φ_E", phi_e)
    _check_unit_length("r_E", r_e)

    return theta_e, phi_e, r_e


def _longitude_from_xy(x, y):
    # atan(y/x) shifted into [0, 2*pi]; x == 0 means a meridian at +-90 degrees
    if x == 0:
        if y > 0:
            return 0.5 * math.pi
        if y < 0:
            return 1.5 * math.pi
        return 0.0  # on the rotation axis, any longitude will do
    phi = math.atan(y / x)
    if x < 0:
        phi += math.pi
    elif y <= 0:
        phi += 2 * math.pi
    return phi


def rotate_pole_through_euler(pole, euler_latitude, euler_longitude, rotation):
    """rotate a reference pole by an Euler rotation

    The pole is expressed in the Euler pole's local basis (L^T), rotated by -rotation around the
    Euler axis (R) and transformed back (L).

    :param pole: the reference pole, a Coordinate (degrees)
    :param euler_latitude: Euler pole latitude in degrees
    :param euler_longitude: Euler pole longitude in degrees
    :param rotation: rotation angle in degrees

    :returns: the rotated pole as a Coordinate (latitude in [-90, 90], longitude in [0, 360])
    """
    theta_e, phi_e, r_e = euler_basis(euler_latitude, euler_longitude)
    L = np.column_stack((theta_e, phi_e, r_e))

    omega = deg2rad(rotation)
    R = np.array(
        [
            [math.cos(-omega), -math.sin(-omega), 0.0],
            [math.sin(-omega), math.cos(-omega), 0.0],
            [0.0, 0.0, 1.0],
        ]
    )

    theta_p = deg2rad(90 - pole.latitude)
    phi_p = deg2rad(pole.longitude)
    xyz = np.array(
        [
            math.cos(phi_p) * math.sin(theta_p),
            math.sin(phi_p) * math.sin(theta_p),
            math.cos(theta_p),
        ]
    )

    x, y, z = (L @ R) @ (L.T @ xyz)
    logger.debug(f"xyz_p_rot = [{x}, {y}, {z}] (result of Euler pole rotation)")

    phi_rot = _longitude_from_xy(float(x), float(y))
    theta_rot = math.acos(min(1.0, max(-1.0, float(z))))
    return Coordinate(rad2deg(0.5 * math.pi - theta_rot), rad2deg(phi_rot))


def _numerator(site, rotated_pole):
    lambda_s = deg2rad(site.latitude)
    phi_s = deg2rad(site.longitude)
    lambda_p = deg2rad(rotated_pole.latitude)
    phi_p = deg2rad(rotated_pole.longitude)
    n = math.sin(lambda_p) * math.sin(lambda_s) + math.cos(lambda_p) * math.cos(
        lambda_s
    ) * math.cos(phi_p - phi_s)
    # rounding may push |n| slightly above 1
    return min(1.0, max(-1.0, n))


def compute_paleolatitude(site, rotated_pole):
    """compute the paleolatitude (degrees) of a site given the rotated reference pole.
    It equals 90 degrees minus the angular distance between the site and the pole."""
    n = _numerator(site, rotated_pole)
    d = math.sqrt(1 - n**2)
    # same as atan(n / d) for d > 0, and +-90 degrees when d == 0
    return rad2deg(math.atan2(n, d))


def compute_uncertainty_bounds(palat, a95):
    """compute the (palat_min, palat_max) uncertainty bounds of a paleolatitude from the
    A95 confidence angle of the reference pole. Both bounds are INVALID_LATITUDE when no
    A95 data is available. No pole crossing correction is applied here.

    :param palat: paleolatitude in degrees
    :param a95: A95 of the reference pole in degrees

    :returns: (palat_min, palat_max) in degrees
    """
    if not a95 > A95_THRESHOLD:
        return INVALID_LATITUDE, INVALID_LATITUDE

    palat_rad = deg2rad(palat)
    delta_i = deg2rad(a95 * 2.0 / (1 + 3 * math.cos(0.5 * math.pi - palat_rad) ** 2))

    # inclination of the geomagnetic field: tan(I) = 2 tan(palat)
    n = math.sin(palat_rad)
    d = math.cos(palat_rad)
    inclination = math.atan2(2 * n, d)

    palat_min = rad2deg(math.atan(0.5 * math.tan(inclination - delta_i)))
    palat_max = rad2deg(math.atan(0.5 * math.tan(inclination + delta_i)))
    return palat_min, palat_max


def correct_pole_crossing(palat, palat_min, palat_max):
    """fix the bounds of a paleolatitude whose uncertainty interval wrapped over a pole

    A bound that moved over the north pole comes back as e.g. -85 instead of 95, one that moved
    over the south pole as e.g. 85 instead of -95. The interval is then extended to the pole.

    :returns: (palat_min, palat_max) in degrees, unchanged when no pole was crossed
    """
    if not (palat_max < palat or palat_min > palat):
        return palat_min, palat_max

    if palat < 0:
        corrected = (-90, max(-abs(palat_min), -abs(palat_max)))
    else:
        corrected = (min(abs(palat_min), abs(palat_max)), 90)
    logger.info(
        f"Applying correction for bounds over pole: [{palat_min},{palat_max}] becomes "
        f"[{corrected[0]},{corrected[1]}]"
    )
    return corrected


def compute_paleolatitude_range(site, euler_entry, apwp_entry):
    """compute (palat_min, palat, palat_max) of a site for one Euler rotation entry and the
    polar wander path entry of its reference plate (at the same age)

    :param site: the site, a Coordinate (degrees)
    :param euler_entry: an EulerPoleEntry
    :param apwp_entry: an APWPEntry of euler_entry.reference_plate_id

    :returns: (palat_min, palat, palat_max); bounds are INVALID_LATITUDE when the A95 is unknown
    """
    logger.debug(
        f"λ_s = {site.latitude}, φ_s = {site.longitude}, age = {euler_entry.age} (Myr); "
        f"λ_E = {euler_entry.latitude}, φ_E = {euler_entry.longitude}, Ω = {euler_entry.rotation}; "
        f"λ_p = {apwp_entry.latitude}, φ_p = {apwp_entry.longitude}, A95 = {apwp_entry.a95}"
    )
    rotated_pole = rotate_pole_through_euler(
        Coordinate(apwp_entry.latitude, apwp_entry.longitude),
        euler_entry.latitude,
        euler_entry.longitude,
        euler_entry.rotation,
    )
    palat = compute_paleolatitude(site, rotated_pole)
    palat_min, palat_max = compute_uncertainty_bounds(palat, apwp_entry.a95)
    if palat_min != INVALID_LATITUDE:
        palat_min, palat_max = correct_pole_crossing(palat, palat_min, palat_max)
    return palat_min, palat, palat_max
