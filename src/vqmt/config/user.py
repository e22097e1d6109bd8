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
import yaml

from vqmt.errors import ConfigurationError

REQUIRED_FIELDS = (
    "ORIGINAL",
    "PROCESSED",
    "HEIGHT",
    "WIDTH",
    "NUM_FRAMES",
    "CHROMA_FORMAT",
    "OUTPUT",
    "METRICS",
)


def _read_yaml(user_config_file):
    with open(user_config_file) as config_file:
        data = yaml.safe_load(config_file)
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{user_config_file}: expected a mapping of parameters at top level"
        )
    missing = [field for field in REQUIRED_FIELDS if field not in data]
    if missing:
        raise ConfigurationError(
            f"{user_config_file}: missing field(s) {', '.join(missing)}"
        )
    return data


def _read_int(data, field, user_config_file):
    value = data[field]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            f"{user_config_file}: {field} must be an integer, got {value!r}"
        )
    return value


def read_config_video(user_config_file):
    """Returns (original, processed, height, width, num_frames, chroma_format)."""
    data = _read_yaml(user_config_file)
    return (
        str(data["ORIGINAL"]),
        str(data["PROCESSED"]),
        _read_int(data, "HEIGHT", user_config_file),
        _read_int(data, "WIDTH", user_config_file),
        _read_int(data, "NUM_FRAMES", user_config_file),
        _read_int(data, "CHROMA_FORMAT", user_config_file),
    )


def read_config_output(user_config_file):
    data = _read_yaml(user_config_file)
    metrics = data["METRICS"]
    if isinstance(metrics, str):
        metrics = metrics.split()
    if not metrics:
        raise ConfigurationError(f"{user_config_file}: METRICS is empty")
    return str(data["OUTPUT"]), [str(m) for m in metrics]
