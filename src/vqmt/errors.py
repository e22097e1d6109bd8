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


class VqmtError(Exception):
    """Base class of all errors raised by vqmt."""


class ConfigurationError(VqmtError, ValueError):
    """Invalid geometry, chroma format or metric selection.

    Always raised before the first frame is processed.
    """


class StreamError(VqmtError, OSError):
    """An input stream cannot be opened or has no frame to deliver."""
