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

"""Paleolatitude results: one entry per age, and the helpers to sort, interpolate and aggregate them."""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from .exceptions import InterpolationError
from .geomath import INVALID_LATITUDE

YEARS_PER_MYR = 1_000_000

ANCHOR_PLATE_ID = 701


def is_valid_latitude(latitude) -> bool:
    """the only validity test of a latitude value (missing values are INVALID_LATITUDE, never NaN)"""
    return latitude != INVALID_LATITUDE


def myr_to_years(age_myr) -> int:
    return int(round(age_myr * YEARS_PER_MYR))


@dataclass(frozen=True)
class PaleoLatitudeEntry:
    """The paleolatitude of a site at one age (or, when aggregated, over an age interval).

    Ages are in years. palat_min and palat_max are INVALID_LATITUDE when no uncertainty
    bounds are available. computed_using_plate_id is the reference plate of the Euler
    rotation (and polar wander path) the value was computed with.
    """

    age_years_lower_bound: int
    age_years: Optional[int]
    age_years_upper_bound: int
    palat_min: float
    palat: float
    palat_max: float
    computed_using_plate_id: int
    is_interpolated: bool = False

    @classmethod
    def at_age(cls, age_myr, palat_min, palat, palat_max, computed_using_plate_id):
        """an entry for a single tabulated age (in Myr)"""
        age_years = myr_to_years(age_myr)
        return cls(
            age_years,
            age_years,
            age_years,
            palat_min,
            palat,
            palat_max,
            computed_using_plate_id,
        )

    @property
    def age_myr(self):
        if self.age_years is None:
            return None
        return self.age_years / YEARS_PER_MYR

    def has_bounds(self) -> bool:
        return is_valid_latitude(self.palat_min) and is_valid_latitude(self.palat_max)

    @staticmethod
    def interpolate(younger, older, age_years) -> "PaleoLatitudeEntry":
        """linearly interpolate two entries at age_years (which lies between their ages).
        Two entries of the same age give back the values of the younger one.

        :raises InterpolationError: if the entries were computed using different reference plates
        """
        if younger.computed_using_plate_id != older.computed_using_plate_id:
            raise InterpolationError(
                f"Cannot interpolate for age={age_years} between two paleolatitude results "
                f"that were computed using two different reference plates "
                f"({younger.computed_using_plate_id} and {older.computed_using_plate_id})"
            )

        delta_age = older.age_years - younger.age_years
        rel_age = age_years - younger.age_years

        def interp(a, b, check_validity=True):
            if check_validity and not (is_valid_latitude(a) and is_valid_latitude(b)):
                return INVALID_LATITUDE
            if delta_age == 0:
                return a
            return a + (b - a) / delta_age * rel_age

        return PaleoLatitudeEntry(
            age_years,
            age_years,
            age_years,
            interp(younger.palat_min, older.palat_min),
            interp(younger.palat, older.palat, check_validity=False),
            interp(younger.palat_max, older.palat_max),
            younger.computed_using_plate_id,
            is_interpolated=True,
        )

    def __str__(self):
        lines = [f"PaleoLatitude for age {self.age_myr} (Myr): "]
        if is_valid_latitude(self.palat_min):
            lines.append(f"Λ_min = {self.palat_min}, ")
        else:
            lines.append("Λ_min = n/a, ")
        lines.append(f"Λ = {self.palat}, ")
        if is_valid_latitude(self.palat_max):
            lines.append(f"Λ_max = {self.palat_max}")
        else:
            lines.append("Λ_max = n/a")
        if self.is_interpolated:
            lines.append(" (interpolated)")
        else:
            lines.append(
                f" (using polar wander path of plate {self.computed_using_plate_id})"
            )
        return "".join(lines)


def sort_entries(entries: Iterable[PaleoLatitudeEntry], anchor_plate_id=ANCHOR_PLATE_ID):
    """Sort entries by age (youngest first). At equal ages, entries computed relative to the
    anchor plate come first, provided both entries have a reference plate. The sort is stable.
    """
    return sorted(
        entries,
        key=lambda e: (e.age_years, 0 if e.computed_using_plate_id == anchor_plate_id else 1),
    )


def interpolate_entries(entries: List[PaleoLatitudeEntry], target_ages_years) -> List[PaleoLatitudeEntry]:
    """Return the interpolated entries for the target ages (in years). A target produces one
    entry for each pair of consecutive (sorted) entries whose ages strictly enclose it. Targets
    are deduplicated. The input entries are not included in the result.
    """
    targets = sorted({t for t in target_ages_years if t is not None})
    res = []
    for younger, older in zip(entries, entries[1:]):
        for target in targets:
            if younger.age_years < target < older.age_years:
                res.append(PaleoLatitudeEntry.interpolate(younger, older, target))
    return res


def aggregate_entries(entries: Iterable[PaleoLatitudeEntry], requested_age_years=None) -> PaleoLatitudeEntry:
    """Aggregate the entries of an age window into one entry.

    The bounds are the running minimum/maximum over every valid palat_min, palat and palat_max.
    The age bounds are the union of the entries' age bounds. When an age was requested, the
    point estimate (palat, age_years) is the last entry at exactly that age. Otherwise (or if
    no entry matches) palat is INVALID_LATITUDE and age_years is None.
    """
    entries = list(entries)
    if not entries:
        raise ValueError("Cannot aggregate an empty list of paleolatitude entries")

    palat_min = INVALID_LATITUDE
    palat_max = INVALID_LATITUDE
    palat = INVALID_LATITUDE
    age_years = None
    age_lower = min(e.age_years_lower_bound for e in entries)
    age_upper = max(e.age_years_upper_bound for e in entries)

    for entry in entries:
        for value in (entry.palat_min, entry.palat, entry.palat_max):
            if not is_valid_latitude(value):
                continue
            if not is_valid_latitude(palat_min) or value < palat_min:
                palat_min = value
            if not is_valid_latitude(palat_max) or value > palat_max:
                palat_max = value

        # at a cross-over age the last entry wins
        if requested_age_years is not None and entry.age_years == requested_age_years:
            palat = entry.palat
            age_years = entry.age_years

    return replace(
        entries[0],
        age_years_lower_bound=age_lower,
        age_years=age_years,
        age_years_upper_bound=age_upper,
        palat_min=palat_min,
        palat=palat,
        palat_max=palat_max,
    )
