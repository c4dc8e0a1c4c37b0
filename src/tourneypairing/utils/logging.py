"""Logging utilities."""

# Tourney Pairing
# Copyright (C) 2025  Tourney Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.


import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from tourneypairing.constants import LOG_DIR_ENV

# the logger format used
LOG_FMT = "LVL: %(levelname)s | FILE PATH: %(pathname)s | FUN: %(funcName)s | msg: %(message)s | ln#:%(lineno)d"


# --- Logging Setup ---
def setup_logger(logger_name: str) -> logging.Logger:
    """Set up loger for a python module.

    Sets up a console handler, and a file handler when the
    ``TOURNEY_PAIRING_LOG_DIR`` environment variable names a folder.

    Parameters
    ----------
    logger_name : str
        The name for the logger, __name__ is idiomatic

    Returns
    -------
    logging.Logger
        the created logger
    """
    lgr = logging.getLogger(name=logger_name)
    lgr.setLevel(logging.INFO)  # Set minimum level
    # Remove any existing handlers on this logger to avoid duplicates
    for _h in list(lgr.handlers):
        lgr.removeHandler(_h)
    # formatter
    log_formatter = logging.Formatter(LOG_FMT)

    # File Handler
    file_handler = None
    log_folder = os.environ.get(LOG_DIR_ENV)
    if log_folder:
        try:
            os.makedirs(log_folder, exist_ok=True)
            log_path = os.path.join(log_folder, "tourney-pairing.log")
            # Use RotatingFileHandler to prevent unbounded log growth
            file_handler = RotatingFileHandler(
                log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8"
            )
            file_handler.setFormatter(log_formatter)
        except OSError as e:
            # continue without file logging
            print(f"Warning: could not open log file in {log_folder}: {e}")
            file_handler = None

    # Console Handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(logging.INFO)
    # add handlers
    lgr.addHandler(console_handler)
    if file_handler:
        lgr.addHandler(file_handler)
    lgr.debug("logger %s initialized", logger_name)
    return lgr


def set_log_level(level: int, prefix: str = "tourneypairing") -> None:
    """Change the level of every logger created under ``prefix``."""
    for name, lgr in logging.root.manager.loggerDict.items():
        if name.startswith(prefix) and isinstance(lgr, logging.Logger):
            lgr.setLevel(level)
            for handler in lgr.handlers:
                handler.setLevel(level)


#  LocalWords:  loger
