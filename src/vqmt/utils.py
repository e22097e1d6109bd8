"""
Copyright (c) 2024, Alliance for Open Media. All rights reserved

This source code is subject to the terms of the BSD 3-Clause Clear License
and the Alliance for Open Media Patent License 1.0. If the BSD 3-Clause Clear
License was not distributed with this source code in the LICENSE file, you
can obtain it at aomedia.org/license/software-license/bsd-3-c-c/.  If the
Alliance for Open Media Patent License 1.0 was not distributed with this
source code in the PATENTS file, you can obtain it at
aomedia.org/license/patent-license/.
"""
import logging
import os
import sys

from vqmt.config.table import LOG_LEVELS, LOGGER_NAME


def setup_logging(log_level, logger_name=LOGGER_NAME, log_file=None):
    """Configures the vqmt logger hierarchy.

    log_level is an index into LOG_LEVELS; 0 disables logging entirely.
    Messages go to stderr, and also to log_file when one is given.
    """
    if not 0 <= log_level < len(LOG_LEVELS):
        raise ValueError(
            "log level must be between 0 and %d, got %d"
            % (len(LOG_LEVELS) - 1, log_level)
        )
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if log_level == 0:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return logger

    logger.setLevel(getattr(logging, LOG_LEVELS[log_level]))
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
