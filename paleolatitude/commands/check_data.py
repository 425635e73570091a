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

import argparse
import logging
import sys

from .. import data, io
from ..exceptions import PaleoLatitudeError

logger = logging.getLogger("paleolatitude")

help_str = "Check that the Euler rotation and polar wander path tables of a data source fit together."

__description__ = f"""{help_str}

Every Euler rotation must refer to a polar wander path entry (reference plate and age) and all
values must be in their valid range. Polar wander path entries which are never referred to are
reported as warnings.

Example usage: 
    - paleolatitude check
    - paleolatitude check --data-source torsvik-2012-vandervoo-2015
    - paleolatitude check --input-apwp-csv apwp.csv --input-euler-rotation-csv euler.csv
"""


def add_parser(subparser):
    """add 'check' command line argument parser"""
    check_cmd = subparser.add_parser(
        "check",
        help=help_str,
        add_help=True,
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    check_cmd.set_defaults(func=run_check_data)
    check_cmd.add_argument("--data-dir", type=str, dest="data_dir")
    check_cmd.add_argument(
        "--data-source",
        type=str,
        dest="data_source",
        help="check only this data source (default: all data sources in the data directory)",
    )
    check_cmd.add_argument("--input-apwp-csv", type=str, dest="input_apwp_csv")
    check_cmd.add_argument("--input-euler-rotation-csv", type=str, dest="input_euler_rotation_csv")


def check_files(apwp_csv, euler_csv):
    """check one pair of tables, print the findings and return the number of errors"""
    errors, warnings = data.check_data_consistency(
        io.read_euler_csv(euler_csv), io.read_apwp_csv(apwp_csv)
    )
    for w in warnings:
        logger.warning(w)
    for e in errors:
        print(f"error: {e}")
    print(f"{euler_csv} + {apwp_csv}: {len(errors)} error(s), {len(warnings)} warning(s)")
    return len(errors)


def run_check_data(args):
    try:
        if args.input_apwp_csv or args.input_euler_rotation_csv:
            if not (args.input_apwp_csv and args.input_euler_rotation_csv):
                sys.stderr.write(
                    "error: specify both --input-apwp-csv and --input-euler-rotation-csv\n"
                )
                return 1
            pairs = [(args.input_apwp_csv, args.input_euler_rotation_csv)]
        elif args.data_source:
            source = data.get_data_source(args.data_source, args.data_dir)
            pairs = [(source.apwp_csv, source.euler_csv)]
        else:
            pairs = [
                (s.apwp_csv, s.euler_csv)
                for s in data.get_known_data_sources(args.data_dir).values()
            ]
            if not pairs:
                sys.stderr.write(
                    f"error: no data sources found in '{data.get_data_dir(args.data_dir)}'\n"
                )
                return 1

        n_errors = sum(check_files(apwp_csv, euler_csv) for apwp_csv, euler_csv in pairs)
    except PaleoLatitudeError as ex:
        sys.stderr.write(f"Unexpected error checking data: {ex}\n")
        return 1

    return 1 if n_errors else 0
