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


class PaleoLatitudeError(Exception):
    """base class of all the errors raised by the paleolatitude package."""


class ParameterValidationError(PaleoLatitudeError, ValueError):
    """raise this exception when the query parameters are inconsistent,
    e.g. more than one age specification or a latitude outside [-90, 90]."""


class DataNotFoundError(PaleoLatitudeError, LookupError):
    """raise this exception when a plate, Euler rotation or polar wander path entry
    for the requested plate ID and age does not exist."""


class AmbiguousLocationError(PaleoLatitudeError):
    """raise this exception when a site is located on (or near) a plate border
    and the owning plate cannot be determined."""


class IndeterminateLocationError(AmbiguousLocationError):
    """raise this exception when the in/out ray votes of the point-in-polygon test
    do not give a clear answer for a single plate."""

    def __init__(self, site, plate, votes_inside, votes_outside):
        self.site = site
        self.plate = plate
        self.votes_inside = votes_inside
        self.votes_outside = votes_outside
        super().__init__(
            f"Could not determine with sufficient certainty whether site ({site}) is on plate "
            f"'{plate.name}' ({plate.id}). Is the site on the border of two plates? "
            f"(Details: in/out ray votes are {votes_inside} vs {votes_outside})"
        )


class GeometryConsistencyError(PaleoLatitudeError):
    """raise this exception when a self-check of the rotation math fails.
    This indicates a bug rather than bad input data."""


class UnconstrainedPlateError(PaleoLatitudeError):
    """raise this exception when a site is located on a plate without reconstruction data."""

    def __init__(self, plate):
        self.plate = plate
        super().__init__(
            f"The provided site is located on an unconstrained plate '{plate.name}' "
            f"(id: {plate.id}) - cannot compute paleolatitude"
        )


class InterpolationError(PaleoLatitudeError):
    """raise this exception when two paleolatitude entries cannot be interpolated,
    i.e. they were computed using two different reference plates."""


class DataFileParseError(PaleoLatitudeError):
    """raise this exception when an input data file cannot be read or parsed."""


class ResultNotComputedError(PaleoLatitudeError):
    """raise this exception when the result is requested before a successful computation."""

    def __init__(self):
        super().__init__("PaleoLatitude not computed - call compute() first")
