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
from typing import Dict, List, NamedTuple

import pandas as pd

from .exceptions import DataFileParseError, DataNotFoundError

logger = logging.getLogger("paleolatitude")

APWP_COLUMNS = ["plate_id", "age", "a95", "latitude", "longitude"]


class APWPEntry(NamedTuple):
    """The paleomagnetic reference pole of a plate at an age (Myr) with its A95 confidence angle.
    An a95 at or below 1e-7 means no uncertainty data is available."""

    plate_id: int
    age: int
    a95: float
    latitude: float
    longitude: float


class PolarWanderPaths(object):
    """Apparent polar wander paths of the reference plates, in source order.
    Per plate, each age occurs once and ages are strictly increasing."""

    def __init__(self, entries, source="<memory>", line_numbers=None):
        self.source = source
        self._entries: List[APWPEntry] = []
        self._index: Dict[tuple, APWPEntry] = {}
        last_age: Dict[int, int] = {}

        entries = list(entries)
        if line_numbers is None:
            line_numbers = [None] * len(entries)

        for entry, line_no in zip(entries, line_numbers):
            entry = APWPEntry(*entry)
            if entry.plate_id in last_age and entry.age <= last_age[entry.plate_id]:
                where = source if line_no is None else f"{source}, line {line_no}"
                raise DataFileParseError(
                    f"Error in polar wander path data ({where}): ages of plate {entry.plate_id} "
                    f"must be strictly increasing ({entry.age} after {last_age[entry.plate_id]})"
                )
            last_age[entry.plate_id] = entry.age
            self._entries.append(entry)
            self._index[(entry.plate_id, entry.age)] = entry

        logger.debug(
            f"Polar wander paths from {source}: {len(self._entries)} entries for {len(last_age)} plates"
        )

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, source="<memory>"):
        missing = [c for c in APWP_COLUMNS if c not in df.columns]
        if missing:
            raise DataFileParseError(f"Missing polar wander path columns {missing} ({source})")
        entries = [
            APWPEntry(
                int(row.plate_id),
                int(row.age),
                float(row.a95),
                float(row.latitude),
                float(row.longitude),
            )
            for row in df.itertuples(index=False)
        ]
        line_numbers = df["line_no"].tolist() if "line_no" in df.columns else None
        return cls(entries, source=source, line_numbers=line_numbers)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self._entries, columns=APWP_COLUMNS)

    def __len__(self):
        return len(self._entries)

    def all_entries(self) -> List[APWPEntry]:
        return list(self._entries)

    def entry_for(self, plate_id, age) -> APWPEntry:
        """return the reference pole of a plate at an age

        :raises DataNotFoundError: if there is no such entry
        """
        try:
            return self._index[(plate_id, age)]
        except KeyError:
            raise DataNotFoundError(
                f"No entry for age={age} and plate_id={plate_id} found in polar wander path table"
            ) from None
