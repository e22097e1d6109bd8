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
import enum

from vqmt.errors import ConfigurationError

METRIC_ALIASES = {"YPSNR": "PSNR"}


class MetricKind(enum.Enum):
    """Selectable metrics; the value is the suffix of the output file."""

    PSNR = "psnr"
    YUVPSNR = "yuvpsnr"
    SSIM = "ssim"
    YUVSSIM = "yuvssim"
    MSSSIM = "msssim"
    FASTSSIM = "fastssim"

    @property
    def uses_yuv(self):
        return self in (MetricKind.YUVPSNR, MetricKind.YUVSSIM)

    @classmethod
    def from_name(cls, name):
        key = METRIC_ALIASES.get(name.upper(), name.upper())
        try:
            return cls[key]
        except KeyError:
            raise ConfigurationError(
                f"Unknown metric {name!r}, available metrics: "
                + ", ".join(m.name for m in cls)
            ) from None
