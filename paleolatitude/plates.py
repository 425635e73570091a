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

"""Plate polygons and the point-in-polygon test used to find the plate a site is located on.

A site is tested against a plate polygon by shooting great circle "rays" from the site to a
fixed set of anchor cities which are guaranteed to lie on different plates. A ray which crosses
the polygon boundary an odd number of times votes "inside". A ray aimed at an anchor on the same
plate as the site (or a ray passing through a polygon vertex) may vote wrongly, so a clear
majority is required before a decision is made.

The cost of a query is O(plates x edges x anchors). Only single point queries are supported.
"""

import logging
from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from .exceptions import (
    AmbiguousLocationError,
    DataNotFoundError,
    IndeterminateLocationError,
)
from .spatial import count_arc_intersections, latlon_array_to_xyz, lonlat2xyz

logger = logging.getLogger("paleolatitude")

UNCONSTRAINED_PLATE_NAME = "mobile belt (unconstrained)"

# a polygon edge whose end point longitudes differ by more than this crosses the antimeridian
ANTIMERIDIAN_JUMP = 270

# a decision needs votes_inside > VOTE_RATIO * votes_outside (or vice versa)
VOTE_RATIO = 2

# a plate is nested in another one if more than this fraction of its vertices is inside the other
NESTED_PLATE_FRACTION = 0.9


class Coordinate(NamedTuple):
    """A (latitude, longitude) pair in degrees. Values are not validated."""

    latitude: float
    longitude: float

    def __str__(self):
        return f"{self.latitude},{self.longitude}"


RAY_TARGETS = (
    Coordinate(89, 0),  # near north pole
    Coordinate(-89, 0),  # near south pole
    Coordinate(-18.933333, 47.516667),  # Antananarivo, Madagascar
    Coordinate(21.3, -157.816667),  # Honolulu, Hawaii
    Coordinate(64.175, -51.738889),  # Nuuk, Greenland
    Coordinate(9.06, 7.47),  # Abuja, Nigeria
    Coordinate(51.5, -0.1),  # London
    Coordinate(-33.8, 151.2),  # Sydney
    Coordinate(45, -93.25),  # Minneapolis
    Coordinate(-22.9, -42.2),  # Rio de Janeiro
    Coordinate(14.75, -17.45),  # Dakar
    Coordinate(22.3, 114.16),  # Hong Kong
)


def filter_plate_name(name: str) -> str:
    """plates without reconstruction data all share one display name"""
    name_lower = name.lower()
    if "unconstrained" in name_lower or "mobile" in name_lower:
        return UNCONSTRAINED_PLATE_NAME
    return name


def decide_by_votes(site, plate, votes_inside, votes_outside, vote_ratio=VOTE_RATIO):
    """turn the in/out ray votes into a decision

    :returns: True if the site is inside the plate, False if it is outside
    :raises IndeterminateLocationError: if neither side has a clear majority
    """
    if votes_inside > vote_ratio * votes_outside:
        return True
    elif votes_outside > vote_ratio * votes_inside:
        return False
    raise IndeterminateLocationError(site, plate, votes_inside, votes_outside)


class Plate(object):
    """One polygon part of a tectonic plate. Several parts may share the same plate ID.

    Parameters
    ----------
    plate_id : int
        The plate ID.
    name : str
        The display name. Names containing "unconstrained" or "mobile" are replaced by
        "mobile belt (unconstrained)".
    coordinates : sequence of Coordinate or (lat, lon) tuples
        The polygon ring. The last point implicitly connects to the first one.
    """

    def __init__(self, plate_id: int, name: str, coordinates: Sequence):
        self.id = int(plate_id)
        self.name = filter_plate_name(name)
        self.coordinates = tuple(Coordinate(float(c[0]), float(c[1])) for c in coordinates)
        if len(self.coordinates) == 0:
            raise ValueError(f"Plate '{name}' ({plate_id}) has no polygon coordinates")

        # edges crossing the antimeridian are dropped up front
        starts = np.array(self.coordinates, dtype=float)
        ends = np.roll(starts, -1, axis=0)
        keep = np.abs(starts[:, 1] - ends[:, 1]) <= ANTIMERIDIAN_JUMP
        self._edge_starts = latlon_array_to_xyz(starts[keep])
        self._edge_ends = latlon_array_to_xyz(ends[keep])

    def __repr__(self):
        return f"Plate(id={self.id}, name='{self.name}', vertices={len(self.coordinates)})"

    def ray_votes(self, point, ray_targets=RAY_TARGETS):
        """return (votes_inside, votes_outside) of the rays from point to ray_targets"""
        point = Coordinate(*point)
        origin = np.array(lonlat2xyz(point.longitude, point.latitude))
        targets = latlon_array_to_xyz(ray_targets)
        counts = count_arc_intersections(
            origin, targets, self._edge_starts, self._edge_ends
        )
        votes_inside = int(np.count_nonzero(counts % 2 == 1))
        return votes_inside, len(counts) - votes_inside

    def contains(self, point, ray_targets=RAY_TARGETS, vote_ratio=VOTE_RATIO) -> bool:
        """test whether a point (Coordinate or (lat, lon)) is inside this plate

        :raises IndeterminateLocationError: if the ray votes are inconclusive
        """
        point = Coordinate(*point)
        votes_inside, votes_outside = self.ray_votes(point, ray_targets)
        return decide_by_votes(point, self, votes_inside, votes_outside, vote_ratio)

    def fully_contains(
        self,
        other,
        ray_targets=RAY_TARGETS,
        vote_ratio=VOTE_RATIO,
        nested_plate_fraction=NESTED_PLATE_FRACTION,
    ) -> bool:
        """test whether the other plate is nested inside this plate. Expensive, only use it
        to resolve a site that appears to be on two plates.

        A vertex whose own ray votes are indeterminate (e.g. on a shared border) counts as
        not inside, it does not raise IndeterminateLocationError.
        """
        n_inside = 0
        for c in other.coordinates:
            try:
                if self.contains(c, ray_targets, vote_ratio):
                    n_inside += 1
            except IndeterminateLocationError as e:
                logger.debug(f"Vertex {c} of {other} does not count as inside {self}: {e}")
        return n_inside / len(other.coordinates) > nested_plate_fraction


class PlateCollection(object):
    """An ordered collection of plate parts which can tell which plate a site is located on."""

    def __init__(
        self,
        plates: Sequence[Plate],
        ray_targets=RAY_TARGETS,
        vote_ratio=VOTE_RATIO,
        nested_plate_fraction=NESTED_PLATE_FRACTION,
    ):
        self._plates = list(plates)
        self.ray_targets = tuple(Coordinate(*t) for t in ray_targets)
        self.vote_ratio = vote_ratio
        self.nested_plate_fraction = nested_plate_fraction

    def __len__(self):
        return len(self._plates)

    def __iter__(self):
        return iter(self._plates)

    def get_plates(self) -> List[Plate]:
        """return all plate parts. A plate made of several parts has one entry per part."""
        return list(self._plates)

    def get_plate_name(self, plate_id: int) -> str:
        """return the name of the first part with the given plate ID, or an empty string"""
        for plate in self._plates:
            if plate.id == plate_id:
                return plate.name
        return ""

    def count_real_number_of_plates(self) -> int:
        """count the distinct plate IDs (rather than the plate parts)"""
        return len({p.id for p in self._plates})

    def _contains(self, plate, site):
        return plate.contains(site, self.ray_targets, self.vote_ratio)

    def _nested(self, outer, inner):
        return outer.fully_contains(
            inner, self.ray_targets, self.vote_ratio, self.nested_plate_fraction
        )

    def find_plate(self, site) -> Plate:
        """find the plate a site (Coordinate or (lat, lon)) is located on

        When two plates contain the site and one of them is nested in the other, the nested
        (more specific) plate is returned.

        :raises DataNotFoundError: if no plate contains the site
        :raises AmbiguousLocationError: if two overlapping plates contain the site
        :raises IndeterminateLocationError: if the ray votes of a plate are inconclusive
        """
        site = Coordinate(*site)
        found: Optional[Plate] = None
        for plate in self._plates:
            if not self._contains(plate, site):
                continue
            if found is None:
                found = plate
            elif self._nested(found, plate):
                logger.debug(f"{plate} is nested in {found}, using {plate}")
                found = plate
            elif self._nested(plate, found):
                logger.debug(f"{found} is nested in {plate}, keeping {found}")
            else:
                raise AmbiguousLocationError(
                    f"Two (or possibly more) plates contain site {site}: "
                    f"'{found.name}' ({found.id}) and '{plate.name}' ({plate.id})"
                )

        if found is None:
            raise DataNotFoundError(f"No plate found for site {site}")
        return found
