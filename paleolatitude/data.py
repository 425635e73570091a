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

"""Discovery of the paleolatitude data sets in a data directory, and their consistency checks.

A data directory holds pairs of tables and the plate polygons::

    data/
        apwp-<source id>.csv
        euler-<source id>.csv
        plates.gpml

An APWP table without an Euler table of the same id uses the Euler table whose id is the longest
prefix of the APWP id (e.g. "apwp-torsvik-2012-vandervoo-2015.csv" may use "euler-torsvik-2012.csv").
"""

import logging
import os
from typing import Dict, List, NamedTuple, Optional, Tuple

from .apwp import PolarWanderPaths
from .euler import EulerPoleTable
from .exceptions import DataNotFoundError

logger = logging.getLogger("paleolatitude")

DATA_DIR_ENV_VAR = "PALEOLATITUDE_DATA_DIR"
DEFAULT_DATA_DIR = "data"
DEFAULT_DATA_SOURCE = "torsvik-2012-vandervoo-2015"

PLATES_FILE_NAMES = ("plates.gpml", "plates.gpmlz", "plates.kml")

MAX_AGE_MYR = 1000
MAX_ABS_ROTATION = 120
# values may overshoot their valid range by this much
BOUNDS_TOLERANCE = 0.01


class DataSource(NamedTuple):
    name: str
    apwp_csv: str
    euler_csv: str
    plates_file: Optional[str]


def get_data_dir(data_dir=None) -> str:
    """the data directory: the argument, else $PALEOLATITUDE_DATA_DIR, else "data" """
    if data_dir:
        return str(data_dir)
    return os.environ.get(DATA_DIR_ENV_VAR, DEFAULT_DATA_DIR)


def find_plates_file(data_dir=None) -> Optional[str]:
    data_dir = get_data_dir(data_dir)
    for name in PLATES_FILE_NAMES:
        path = os.path.join(data_dir, name)
        if os.path.isfile(path):
            return path
    return None


def _ids_with_prefix(filenames, prefix):
    return sorted(
        f[len(prefix) : -len(".csv")]
        for f in filenames
        if f.startswith(prefix) and f.endswith(".csv") and len(f) > len(prefix) + len(".csv")
    )


def get_known_data_sources(data_dir=None) -> Dict[str, DataSource]:
    """return the data sources in the data directory, keyed by the APWP id. APWP tables without
    a matching Euler table are skipped with a warning."""
    data_dir = get_data_dir(data_dir)
    if not os.path.isdir(data_dir):
        logger.warning(f"The data directory '{data_dir}' does not exist.")
        return {}

    filenames = os.listdir(data_dir)
    apwp_ids = _ids_with_prefix(filenames, "apwp-")
    euler_ids = _ids_with_prefix(filenames, "euler-")
    plates_file = find_plates_file(data_dir)

    sources = {}
    for apwp_id in apwp_ids:
        if apwp_id in euler_ids:
            euler_id = apwp_id
        else:
            candidates = [e for e in euler_ids if apwp_id.startswith(e)]
            if not candidates:
                logger.warning(
                    f"No Euler rotation data found for 'apwp-{apwp_id}.csv' in '{data_dir}' - ignoring it."
                )
                continue
            euler_id = max(candidates, key=len)
        sources[apwp_id] = DataSource(
            apwp_id,
            os.path.join(data_dir, f"apwp-{apwp_id}.csv"),
            os.path.join(data_dir, f"euler-{euler_id}.csv"),
            plates_file,
        )
    return sources


def get_data_source(name=DEFAULT_DATA_SOURCE, data_dir=None) -> DataSource:
    """
    :raises DataNotFoundError: if the data source is not in the data directory
    """
    sources = get_known_data_sources(data_dir)
    if name not in sources:
        known = ", ".join(sources) if sources else "none"
        raise DataNotFoundError(
            f"Unknown data source '{name}' in '{get_data_dir(data_dir)}' (available: {known})"
        )
    return sources[name]


def _out_of_bounds(df, column, low, high):
    return df[(df[column] < low - BOUNDS_TOLERANCE) | (df[column] > high + BOUNDS_TOLERANCE)]


def check_data_consistency(
    euler_table: EulerPoleTable, apwp_table: PolarWanderPaths
) -> Tuple[List[str], List[str]]:
    """Check that a pair of tables can be used together.

    Errors: an Euler rotation whose reference plate has no polar wander path entry at that age,
    and values out of their valid range. Warnings: polar wander path entries that no Euler
    rotation refers to (they are never used).

    :returns: (errors, warnings), two lists of messages
    """
    errors = []
    warnings = []
    euler_df = euler_table.to_dataframe()
    apwp_df = apwp_table.to_dataframe()

    merged = euler_df.merge(
        apwp_df[["plate_id", "age"]].rename(columns={"plate_id": "reference_plate_id"}),
        on=["reference_plate_id", "age"],
        how="left",
        indicator=True,
    )
    for row in merged[merged["_merge"] == "left_only"].itertuples(index=False):
        errors.append(
            f"Euler rotation of plate {row.plate_id} at age {row.age} requires an apparent polar "
            f"wander path for plate {row.reference_plate_id} and age {row.age}, but there is no such data."
        )

    referenced = euler_df[["reference_plate_id", "age"]].drop_duplicates()
    unused = apwp_df.merge(
        referenced.rename(columns={"reference_plate_id": "plate_id"}),
        on=["plate_id", "age"],
        how="left",
        indicator=True,
    )
    for row in unused[unused["_merge"] == "left_only"].itertuples(index=False):
        warnings.append(
            f"Apparent polar wander path available for plate ID {row.plate_id} and age {row.age}, "
            f"but it is not referred to from the Euler rotation data, so is never used."
        )

    checks = [
        ("Euler rotation", euler_df, "age", 0, MAX_AGE_MYR),
        ("Euler rotation", euler_df, "latitude", -90, 90),
        ("Euler rotation", euler_df, "longitude", -180, 180),
        ("Euler rotation", euler_df, "rotation", -MAX_ABS_ROTATION, MAX_ABS_ROTATION),
        ("polar wander path", apwp_df, "age", 0, MAX_AGE_MYR),
        ("polar wander path", apwp_df, "latitude", -90, 90),
        ("polar wander path", apwp_df, "longitude", 0, 360),
    ]
    for label, df, column, low, high in checks:
        for row in _out_of_bounds(df, column, low, high).itertuples(index=False):
            errors.append(
                f"{label} of plate {row.plate_id} at age {row.age}: {column} {getattr(row, column)} "
                f"outside [{low},{high}]"
            )

    return errors, warnings
