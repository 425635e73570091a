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
import bisect
import logging
import math
from typing import Dict, List, NamedTuple

import pandas as pd

from .exceptions import DataFileParseError, DataNotFoundError

logger = logging.getLogger("paleolatitude")

EULER_COLUMNS = [
    "plate_id",
    "age",
    "latitude",
    "longitude",
    "rotation",
    "reference_plate_id",
]

# a plate has two entries for one age where its rotation switches reference plate (a cross-over)
MAX_ENTRIES_PER_AGE = 2


class EulerPoleEntry(NamedTuple):
    """The finite rotation of a plate relative to a reference plate at an age (Myr)."""

    plate_id: int
    age: int
    latitude: float
    longitude: float
    rotation: float
    reference_plate_id: int


def _plate_id(plate):
    # accept either a Plate or a bare plate ID
    return getattr(plate, "id", plate)


class EulerPoleTable(object):
    """Euler rotations of all plates, in source order.

    Parameters
    ----------
    entries : iterable of EulerPoleEntry
        The rotations. Per plate, ages must not decrease and each age may occur at most twice.
    source : str, optional
        Where the entries came from, used in error messages.
    line_numbers : sequence of int, optional
        The source line of each entry, used in error messages.
    """

    def __init__(self, entries, source="<memory>", line_numbers=None):
        self.source = source
        self._entries: List[EulerPoleEntry] = []
        self._by_plate: Dict[int, List[EulerPoleEntry]] = {}

        entries = list(entries)
        if line_numbers is None:
            line_numbers = [None] * len(entries)

        for entry, line_no in zip(entries, line_numbers):
            entry = EulerPoleEntry(*entry)
            plate_entries = self._by_plate.setdefault(entry.plate_id, [])
            if plate_entries and entry.age < plate_entries[-1].age:
                raise DataFileParseError(
                    self._location(line_no)
                    + f"ages of plate {entry.plate_id} are not sorted ({entry.age} after {plate_entries[-1].age})"
                )
            same_age = [e for e in plate_entries if e.age == entry.age]
            if len(same_age) >= MAX_ENTRIES_PER_AGE:
                raise DataFileParseError(
                    self._location(line_no)
                    + f"more than {MAX_ENTRIES_PER_AGE} entries for plate {entry.plate_id} at age {entry.age}"
                )
            plate_entries.append(entry)
            self._entries.append(entry)

        logger.debug(
            f"Euler pole table from {source}: {len(self._entries)} entries for {len(self._by_plate)} plates"
        )

    def _location(self, line_no):
        if line_no is None:
            return f"Error in Euler pole data ({self.source}): "
        return f"Error in Euler pole data ({self.source}, line {line_no}): "

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, source="<memory>"):
        """build the table from a DataFrame with the EULER_COLUMNS (and optionally a "line_no" column)"""
        missing = [c for c in EULER_COLUMNS if c not in df.columns]
        if missing:
            raise DataFileParseError(f"Missing Euler pole columns {missing} ({source})")
        entries = [
            EulerPoleEntry(
                int(row.plate_id),
                int(row.age),
                float(row.latitude),
                float(row.longitude),
                float(row.rotation),
                int(row.reference_plate_id),
            )
            for row in df.itertuples(index=False)
        ]
        line_numbers = df["line_no"].tolist() if "line_no" in df.columns else None
        return cls(entries, source=source, line_numbers=line_numbers)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self._entries, columns=EULER_COLUMNS)

    def __len__(self):
        return len(self._entries)

    def all_entries(self) -> List[EulerPoleEntry]:
        return list(self._entries)

    def plate_ids(self) -> List[int]:
        return sorted(self._by_plate)

    def ages_for(self, plate) -> List[int]:
        """the distinct ages (ascending) at which the plate has a rotation"""
        return sorted({e.age for e in self._by_plate.get(_plate_id(plate), [])})

    def relevant_ages(self, plate, min_age, max_age=math.inf) -> List[int]:
        """Return the ages needed to cover the window [min_age, max_age] for a plate: every
        tabulated age inside the window, plus the closest age below min_age and the closest
        age above max_age (when they exist), so that values at the window bounds can be
        interpolated. The result is ascending and free of duplicates. It is empty when the
        plate has no rotations.
        """
        ages = self.ages_for(plate)
        if not ages:
            return []

        lo = bisect.bisect_left(ages, min_age)
        if math.isinf(max_age):
            hi = len(ages)
        else:
            hi = bisect.bisect_right(ages, max_age)

        first, last = lo, hi
        # closest age strictly below min_age, unless min_age itself is tabulated
        if lo > 0 and (lo == len(ages) or ages[lo] != min_age):
            first = lo - 1
        # closest age strictly above max_age, unless max_age itself is tabulated
        if hi < len(ages) and (hi == 0 or ages[hi - 1] != max_age):
            last = hi + 1
        return ages[first:last]

    def entries_for(self, plate, age) -> List[EulerPoleEntry]:
        """return the one or two (at a cross-over) rotations of a plate at an age

        :raises DataNotFoundError: if the plate has no rotation at that age
        """
        plate_id = _plate_id(plate)
        res = [e for e in self._by_plate.get(plate_id, []) if e.age == age]
        if not res:
            raise DataNotFoundError(
                f"No entry for age={age} and plate_id={plate_id} found in Euler pole table"
            )
        return res
