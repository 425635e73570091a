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

from ..utils.version import get_distribution_version

help_str = "Print information about PaleoLatitude (version, license and how to cite it)."

__description__ = f"""{help_str}

Example usage: 
    - paleolatitude about
"""


def get_about_text():
    return f"""This is PaleoLatitude version {get_distribution_version()} (http://www.paleolatitude.org)
Source code licensed under the GNU General Public License, version 2

Please cite:
  Douwe J.J. van Hinsbergen, Lennart V. de Groot, Sebastiaan J. van Schaik,
  Appy Sluijs, Peter K. Bijl, Wim Spakman, Cor G. Langereis, Henk Brinkhuis:
  A Paleolatitude Calculator for Paleoclimate Studies
  In: PLoS ONE, 2015 (http://doi.org/10.1371/journal.pone.0126946).
"""


def print_about():
    print(get_about_text())


def add_parser(subparser):
    """add 'about' command line argument parser"""
    about_cmd = subparser.add_parser(
        "about",
        help=help_str,
        add_help=True,
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    about_cmd.set_defaults(func=run_about)


def run_about(args):
    print_about()
    return 0
