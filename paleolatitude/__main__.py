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
import sys

from paleolatitude import __version__

from .commands import about, check_data, compute, list_data


class ArgParser(argparse.ArgumentParser):
    def error(self, message):
        sys.stderr.write(f"error: {message}\n")
        self.print_help()
        sys.exit(1)


def main(argv=None):
    parser = ArgParser(
        prog="paleolatitude",
        description="Compute the paleolatitude of a site from plate reconstructions and apparent polar wander paths.",
    )

    parser.add_argument("-v", "--version", action="store_true")

    # sub-commands
    subparser = parser.add_subparsers(
        dest="command",
        title="subcommands",
        description="valid subcommands",
        parser_class=ArgParser,
    )

    # add "compute" sub-command
    compute.add_parser(subparser)

    # add "list" sub-command
    list_data.add_parser(subparser)

    # add "check" sub-command
    check_data.add_parser(subparser)

    # add "about" sub-command
    about.add_parser(subparser)

    if argv is None:
        argv = sys.argv[1:]

    if len(argv) == 0:
        parser.print_help(sys.stderr)
        sys.exit(1)

    args = parser.parse_args(argv)

    if args.version:
        print(f"PaleoLatitude {__version__}")
        sys.exit(0)

    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
