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
import logging.config
import logging.handlers
import os

import yaml

LOGGER_NAME = "paleolatitude"

# log levels accepted by the command line "--log-level" option
#   0: only errors, 1: warnings and errors, 2: info, warnings and errors, 3: debug
CLI_LOG_LEVELS = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: logging.DEBUG,
}


# configurate the logging utility
def setup_logging():
    cfg_file_path = (
        f"{os.path.dirname(os.path.realpath(__file__))}/../logging_config.yaml"
    )
    if os.path.isfile(cfg_file_path):
        with open(cfg_file_path, "rt") as f:
            config = yaml.safe_load(f.read())
        logging.config.dictConfig(config)

        for name in logging.root.manager.loggerDict:
            logging.getLogger(LOGGER_NAME).debug(f"logger: {name}")
            for h in logging.getLogger(name).handlers:
                logging.getLogger(LOGGER_NAME).debug(h)
    if get_debug_level() > 0:
        turn_on_debug_logging()


def turn_on_debug_logging():
    debug_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s [%(module)s:%(filename)s:%(lineno)s]"
    )
    paleolatitude_logger = logging.getLogger(LOGGER_NAME)
    paleolatitude_logger.setLevel(logging.DEBUG)
    for h in paleolatitude_logger.handlers:
        h.setLevel(logging.DEBUG)
        h.setFormatter(debug_formatter)

    paleolatitude_logger.debug("The paleolatitude debug logging has been turned on.")


def set_log_level(level: int):
    """Set the level of the package logger from a command line log level (0 to 3).
    Levels above 3 are treated as 3."""
    if level < 0:
        raise ValueError(f"Invalid log level: {level}")
    if level >= 3:
        turn_on_debug_logging()
        return
    paleolatitude_logger = logging.getLogger(LOGGER_NAME)
    paleolatitude_logger.setLevel(CLI_LOG_LEVELS[level])
    for h in paleolatitude_logger.handlers:
        h.setLevel(CLI_LOG_LEVELS[level])


def get_debug_level():
    if "PALEOLATITUDE_DEBUG" in os.environ:
        if os.environ["PALEOLATITUDE_DEBUG"].lower() == "true":
            return 1
        try:
            return int(os.environ["PALEOLATITUDE_DEBUG"])
        except ValueError:
            return 0
    else:
        return 0
