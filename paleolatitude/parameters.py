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
import math
from dataclasses import dataclass
from typing import Optional

from .exceptions import ParameterValidationError
from .plates import Coordinate
from .result import myr_to_years

# input coordinates may overshoot the valid range by this much (rounding in user input)
COORDINATE_TOLERANCE = 0.001

_ONE_AGE_MODE = (
    "Error in input parameters: specify exactly one of: age, age-min and age-max "
    "(optionally with age), age and age-pm, or all-ages"
)


@dataclass
class QueryParameters:
    """A paleolatitude query: a site and one of four age specifications (all ages in Myr).

    - single age: ``age``
    - age range: ``age_min`` and ``age_max``, optionally with an ``age`` inside the range
    - age with error: ``age`` and ``age_pm``, the window is [max(age - age_pm, 0), age + age_pm]
    - all ages: ``all_ages=True``, the window is [0, inf)
    """

    site_latitude: float
    site_longitude: float
    age: Optional[float] = None
    age_min: Optional[float] = None
    age_max: Optional[float] = None
    age_pm: Optional[float] = None
    all_ages: bool = False

    @property
    def site(self) -> Coordinate:
        return Coordinate(self.site_latitude, self.site_longitude)

    @property
    def mode(self) -> str:
        if self.all_ages:
            return "all"
        if self.age_min is not None or self.age_max is not None:
            return "range"
        if self.age_pm is not None:
            return "pm"
        return "single"

    def validate(self):
        """check the parameters are consistent

        :raises ParameterValidationError: with a user facing message
        """
        for name in ("age", "age_min", "age_max", "age_pm"):
            value = getattr(self, name)
            if value is not None and (math.isnan(value) or value < 0):
                raise ParameterValidationError(
                    f"Error in input parameters: {name.replace('_', '-')} must be a non-negative number ({value})"
                )

        has_range = self.age_min is not None or self.age_max is not None
        has_pm = self.age_pm is not None
        n_modes = sum([has_range, has_pm, bool(self.all_ages)])
        if n_modes > 1:
            raise ParameterValidationError(_ONE_AGE_MODE)

        if self.all_ages and self.age is not None:
            raise ParameterValidationError(_ONE_AGE_MODE)

        if has_range:
            if self.age_min is None or self.age_max is None:
                raise ParameterValidationError(
                    "Error in input parameters: only one of age-min or age-max specified, "
                    "please specify either both or neither"
                )
            if self.age_min > self.age_max:
                raise ParameterValidationError(
                    f"Error in input parameters: age-min ({self.age_min}) is larger than age-max ({self.age_max})"
                )
            if self.age is not None and not (self.age_min <= self.age <= self.age_max):
                raise ParameterValidationError(
                    "Error in input parameters: age not within bounds of [age_min, age_max]"
                )

        if has_pm and self.age is None:
            raise ParameterValidationError(
                "Error in input parameters: age-pm specified, but age missing or invalid"
            )

        if n_modes == 0 and self.age is None:
            raise ParameterValidationError(
                "Error in input parameters: no age specified (through age, age-min/age-max, age-pm or all-ages)"
            )

        if self.site_latitude is None or not abs(self.site_latitude) <= 90 + COORDINATE_TOLERANCE:
            raise ParameterValidationError(
                "Invalid latitude specified. Expecting a latitude in the range [-90, 90]"
            )
        if self.site_longitude is None or not abs(self.site_longitude) <= 180 + COORDINATE_TOLERANCE:
            raise ParameterValidationError(
                "Invalid site longitude specified. Expecting a longitude in the range [-180,180]"
            )

    def has_age(self) -> bool:
        return self.age is not None

    def get_min_age(self) -> float:
        if self.all_ages:
            return 0.0
        if self.age_min is not None:
            return self.age_min
        if self.age_pm is not None:
            return max(self.age - self.age_pm, 0.0)
        return self.age

    def get_max_age(self) -> float:
        if self.all_ages:
            return math.inf
        if self.age_max is not None:
            return self.age_max
        if self.age_pm is not None:
            return self.age + self.age_pm
        return self.age

    def get_age_window(self):
        """return the (min, max) age window in Myr; max is math.inf for all ages"""
        return self.get_min_age(), self.get_max_age()

    def get_age_in_years(self) -> Optional[int]:
        return myr_to_years(self.age) if self.has_age() else None

    def get_target_ages_in_years(self):
        """the ages (in years) the result must have exact values for: the window bounds and
        the requested age. Nothing is targeted when all ages are requested."""
        if self.all_ages:
            return []
        return [
            myr_to_years(self.get_min_age()),
            self.get_age_in_years(),
            myr_to_years(self.get_max_age()),
        ]
