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

from .. import data

logger = logging.getLogger("paleolatitude")

help_str = "Show a list of the data sources available in the data directory."

__description__ = f"""{help_str}

Example usage: 
    - paleolatitude list
    - paleolatitude list --data-dir /path/to/data
"""


def add_parser(subparser):
    """add 'list' command line argument parser"""
    list_cmd = subparser.add_parser(
        "list",
        help=help_str,
        add_help=True,
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    list_cmd.set_defaults(func=run_list_data_sources)
    list_cmd.add_argument("--data-dir", type=str, dest="data_dir")


def run_list_data_sources(args):
    sources = data.get_known_data_sources(args.data_dir)
    print()
    print(f"Data sources in '{data.get_data_dir(args.data_dir)}':")
    for name, source in sources.items():
        default = " (default)" if name == data.DEFAULT_DATA_SOURCE else ""
        print(f"    {name}{default}")
        print(f"        polar wander paths: {source.apwp_csv}")
        print(f"        Euler rotations: {source.euler_csv}")
        print(f"        plates: {source.plates_file or 'not found'}")
    print()
    return 0
