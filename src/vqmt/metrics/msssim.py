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
import numpy as np

from vqmt.config.table import MSSSIM_SIZE_MULTIPLE, MSSSIM_WEIGHTS
from vqmt.errors import ConfigurationError
from vqmt.metrics.metric import Metric
from vqmt.metrics.ssim import SSIM


def downsample(src, dst):
    """2x2 mean of src written into dst (half height, half width)."""
    np.add(src[0::2, 0::2], src[1::2, 0::2], out=dst)
    dst += src[0::2, 1::2]
    dst += src[1::2, 1::2]
    dst *= 0.25
    return dst


class MSSSIM(Metric):
    """Multi-scale SSIM over a five level 2x2-mean pyramid.

    After compute(), ssim holds the single scale SSIM of the first level.
    """

    def __init__(self, height, width, channels=1, dtype=np.float32):
        if height % MSSSIM_SIZE_MULTIPLE or width % MSSSIM_SIZE_MULTIPLE:
            raise ConfigurationError(
                "MS-SSIM: 'height' and 'width' have to be multiple of %d."
                % MSSSIM_SIZE_MULTIPLE
            )
        super().__init__(height, width, channels, dtype)
        self.weights = MSSSIM_WEIGHTS
        self.levels = len(self.weights)
        self.ssim = None
        self.mssim = np.zeros(self.levels)
        self.mcs = np.zeros(self.levels)

        self._scorers = []
        self._pyramid = []
        for level in range(self.levels):
            h, w = height >> level, width >> level
            self._scorers.append(SSIM(h, w, channels, dtype))
            if level > 0:
                shape = (h, w) if channels == 1 else (h, w, channels)
                self._pyramid.append(
                    (np.empty(shape, dtype=self.dtype), np.empty(shape, dtype=self.dtype))
                )

    def compute(self, original, processed):
        original, processed = self._prepare(original, processed)
        img1, img2 = original, processed
        for level, scorer in enumerate(self._scorers):
            if level > 0:
                down1, down2 = self._pyramid[level - 1]
                img1 = downsample(img1, down1)
                img2 = downsample(img2, down2)
            self.mssim[level], self.mcs[level] = scorer.compute_ssim(img1, img2)

        self.ssim = float(self.mssim[0])
        # a negative mean cs raised to a fractional weight is nan
        with np.errstate(invalid="ignore"):
            factors = np.power(self.mcs[:-1], self.weights[:-1])
            msssim = np.prod(factors) * np.power(self.mssim[-1], self.weights[-1])
        return float(msssim)
