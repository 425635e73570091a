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

"""
Compute the paleolatitude of a site at a geological age by combining plate tectonic
reconstructions (Euler rotations of the plates) with paleomagnetic reference data
(apparent polar wander paths, APWP).

```python
import paleolatitude

pl = paleolatitude.PaleoLatitude.from_files(
    "data/apwp-torsvik-2012-vandervoo-2015.csv",
    "data/euler-torsvik-2012-vandervoo-2015.csv",
    "data/plates.gpml",
)
params = paleolatitude.QueryParameters(-33.925278, 18.423889, age=50, age_pm=5)
if pl.compute(params):
    print(pl.get_paleolatitude())
```
"""

from .utils.log_utils import setup_logging
from .utils.version import get_distribution_version

__version__ = get_distribution_version()

setup_logging()
del setup_logging

from . import data, geomath, io
from .apwp import APWPEntry, PolarWanderPaths
from .euler import EulerPoleEntry, EulerPoleTable
from .exceptions import (
    AmbiguousLocationError,
    DataFileParseError,
    DataNotFoundError,
    GeometryConsistencyError,
    IndeterminateLocationError,
    InterpolationError,
    PaleoLatitudeError,
    ParameterValidationError,
    ResultNotComputedError,
    UnconstrainedPlateError,
)
from .geomath import INVALID_LATITUDE
from .paleolatitude import ComputationState, PaleoLatitude
from .parameters import QueryParameters
from .plates import Coordinate, Plate, PlateCollection
from .result import PaleoLatitudeEntry, is_valid_latitude

__all__ = [
    # modules
    "data",
    "geomath",
    "io",
    # main classes
    "PaleoLatitude",
    "QueryParameters",
    "PlateCollection",
    "EulerPoleTable",
    "PolarWanderPaths",
    # other classes
    "APWPEntry",
    "ComputationState",
    "Coordinate",
    "EulerPoleEntry",
    "PaleoLatitudeEntry",
    "Plate",
    # exceptions
    "AmbiguousLocationError",
    "DataFileParseError",
    "DataNotFoundError",
    "GeometryConsistencyError",
    "IndeterminateLocationError",
    "InterpolationError",
    "PaleoLatitudeError",
    "ParameterValidationError",
    "ResultNotComputedError",
    "UnconstrainedPlateError",
    # functions
    "is_valid_latitude",
    # constants
    "INVALID_LATITUDE",
]
