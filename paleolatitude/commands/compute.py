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

from .. import data
from ..exceptions import PaleoLatitudeError
from ..paleolatitude import PaleoLatitude
from ..parameters import QueryParameters
from ..result import YEARS_PER_MYR, is_valid_latitude
from ..utils.log_utils import set_log_level
from .about import print_about

logger = logging.getLogger("paleolatitude")

help_str = "Compute the paleolatitude of a site at an age (or over an age range)."

__description__ = f"""{help_str}

Specify the age with exactly one of:
    --age
    --min-age and --max-age (optionally with --age)
    --age and --age-error
    --all-ages

The data files are taken from the data source in the data directory (see "paleolatitude list")
unless they are given explicitly.

Example usage: 
    - paleolatitude compute --site-lat -33.9 --site-lon 18.4 --age 50 --age-error 5
    - paleolatitude compute --site-lat 52.1 --site-lon 5.1 --all-ages --csv-output-file out.csv
    - paleolatitude compute --site-lat 52.1 --site-lon 5.1 --min-age 40 --max-age 60 --machine-readable
"""


def add_parser(subparser):
    """add 'compute' command line argument parser"""
    compute_cmd = subparser.add_parser(
        "compute",
        help=help_str,
        add_help=True,
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    compute_cmd.set_defaults(func=run_compute)

    compute_cmd.add_argument(
        "--site-lat", type=float, dest="site_lat", required=True, help="the site latitude"
    )
    compute_cmd.add_argument(
        "--site-lon", type=float, dest="site_lon", required=True, help="the site longitude"
    )
    compute_cmd.add_argument(
        "--age", type=float, dest="age", help="the age (in million years)"
    )
    compute_cmd.add_argument(
        "--min-age", type=float, dest="min_age", help="the lower bound of the age (in million years)"
    )
    compute_cmd.add_argument(
        "--max-age", type=float, dest="max_age", help="the upper bound of the age (in million years)"
    )
    compute_cmd.add_argument(
        "--age-error",
        "--age-pm",
        type=float,
        dest="age_pm",
        help="the error (+/-) around the age (in million years)",
    )
    compute_cmd.add_argument(
        "--all-ages",
        dest="all_ages",
        action="store_true",
        help="compute the paleolatitude for all available ages (works best with --csv-output-file or --machine-readable)",
    )

    compute_cmd.add_argument(
        "--data-dir",
        type=str,
        dest="data_dir",
        help=f"the data directory (default: ${data.DATA_DIR_ENV_VAR} or '{data.DEFAULT_DATA_DIR}')",
    )
    compute_cmd.add_argument(
        "--data-source",
        type=str,
        dest="data_source",
        default=data.DEFAULT_DATA_SOURCE,
        help=f"the data source in the data directory (default: {data.DEFAULT_DATA_SOURCE})",
    )
    compute_cmd.add_argument(
        "--input-apwp-csv",
        type=str,
        dest="input_apwp_csv",
        help="path to the apparent polar wander paths of the plates (CSV)",
    )
    compute_cmd.add_argument(
        "--input-euler-rotation-csv",
        type=str,
        dest="input_euler_rotation_csv",
        help="path to the Euler rotations of the plates (CSV)",
    )
    compute_cmd.add_argument(
        "--input-plates-file",
        type=str,
        dest="input_plates_file",
        help="path to the plate polygons (GPML or KML)",
    )

    compute_cmd.add_argument(
        "--csv-output-file", type=str, dest="csv_output_file", help="write detailed CSV output to this file"
    )
    compute_cmd.add_argument(
        "--kml-output-file",
        type=str,
        dest="kml_output_file",
        help="write the tectonic plates and the site to this KML file",
    )
    compute_cmd.add_argument(
        "--machine-readable",
        dest="machine_readable",
        action="store_true",
        help="print machine readable output (including CSV and KML) on standard output",
    )
    compute_cmd.add_argument(
        "--skip-about",
        dest="skip_about",
        action="store_true",
        help="skip the header containing version and citation information",
    )
    compute_cmd.add_argument(
        "--log-level",
        type=int,
        dest="log_level",
        default=2,
        choices=[0, 1, 2, 3],
        help="0 = only errors, 1 = warnings, 2 = info, 3 = debug (default: 2)",
    )


def _resolve_input_files(args):
    apwp_csv = args.input_apwp_csv
    euler_csv = args.input_euler_rotation_csv
    plates_file = args.input_plates_file
    if not (apwp_csv and euler_csv and plates_file):
        source = data.get_data_source(args.data_source, args.data_dir)
        apwp_csv = apwp_csv or source.apwp_csv
        euler_csv = euler_csv or source.euler_csv
        plates_file = plates_file or source.plates_file
    if not plates_file:
        raise PaleoLatitudeError(
            f"No plates file found in '{data.get_data_dir(args.data_dir)}', use --input-plates-file"
        )
    return apwp_csv, euler_csv, plates_file


def format_result(params, res):
    """the human readable summary of the aggregated result"""
    site = f"The paleolatitude of site ({params.site_latitude},{params.site_longitude}) "
    lower = res.age_years_lower_bound / YEARS_PER_MYR
    upper = res.age_years_upper_bound / YEARS_PER_MYR
    if res.age_years is not None and is_valid_latitude(res.palat):
        text = f"{site}at age {res.age_years / YEARS_PER_MYR} Myr is: {res.palat}"
        if res.has_bounds():
            text += f" (bounds: [{res.palat_min},{res.palat_max}])"
        else:
            text += " (bounds n/a)"
        if res.age_years != res.age_years_lower_bound or res.age_years != res.age_years_upper_bound:
            text += f" for age range [{lower},{upper}] Myr"
        return text
    return f"{site}in age range [{lower},{upper}] Myr is: [{res.palat_min},{res.palat_max}]"


def run_compute(args):
    set_log_level(args.log_level)

    if not args.skip_about and not args.machine_readable:
        print_about()

    params = QueryParameters(
        site_latitude=args.site_lat,
        site_longitude=args.site_lon,
        age=args.age,
        age_min=args.min_age,
        age_max=args.max_age,
        age_pm=args.age_pm,
        all_ages=args.all_ages,
    )

    try:
        pl = PaleoLatitude.from_files(*_resolve_input_files(args))
        if not pl.compute(params):
            # the reason has been logged
            return 1

        if args.machine_readable:
            sys.stdout.write(pl.format_machine_readable())
        else:
            print(format_result(params, pl.get_paleolatitude()))

        if args.csv_output_file:
            pl.write_csv(args.csv_output_file)
            logger.info(f"The CSV output has been saved to {args.csv_output_file}.")
        if args.kml_output_file:
            pl.write_kml(args.kml_output_file)
            logger.info(f"The KML output has been saved to {args.kml_output_file}.")
    except (PaleoLatitudeError, OSError) as ex:
        sys.stderr.write(f"Unexpected error computing paleolatitude: {ex}\n")
        return 1

    return 0
