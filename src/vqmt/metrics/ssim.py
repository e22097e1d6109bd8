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
#
# Structural similarity as defined in
# Z. Wang, A.C. Bovik, H.R. Sheikh, and E.P. Simoncelli, "Image quality
# assessment: from error visibility to structural similarity," IEEE
# Transactions on Image Processing, vol. 13, no. 4, pp. 600-612, April 2004.
#
import numpy as np

from vqmt.config.table import SSIM_C1, SSIM_C2
from vqmt.errors import ConfigurationError
from vqmt.metrics.metric import Metric
from vqmt.metrics.window import (
    BOX_WINDOW,
    GAUSSIAN_WINDOW,
    WindowedStatistics,
    valid_shape,
)


class LocalStatistics:
    """Valid-extent scratch buffers of one window kernel."""

    def __init__(self, shape, dtype, kernel):
        valid = valid_shape(shape, kernel)
        self.kernel = kernel
        self.mu1 = np.empty(valid, dtype=dtype)
        self.mu2 = np.empty(valid, dtype=dtype)
        self.mu1_sq = np.empty(valid, dtype=dtype)
        self.mu2_sq = np.empty(valid, dtype=dtype)
        self.mu1_mu2 = np.empty(valid, dtype=dtype)
        self.sigma1_sq = np.empty(valid, dtype=dtype)
        self.sigma2_sq = np.empty(valid, dtype=dtype)
        self.sigma12 = np.empty(valid, dtype=dtype)


class SSIM(Metric):
    """Mean SSIM over an 11x11 Gaussian window (sigma 1.5).

    With fast_path=True the scorer also owns the buffers of the 8x8 box
    window used by compute_fast().
    """

    C1 = SSIM_C1
    C2 = SSIM_C2

    def __init__(
        self,
        height,
        width,
        channels=1,
        dtype=np.float32,
        kernel=GAUSSIAN_WINDOW,
        fast_path=False,
        fast_kernel=BOX_WINDOW,
    ):
        super().__init__(height, width, channels, dtype)
        kernels = [kernel, fast_kernel] if fast_path else [kernel]
        for k in kernels:
            if height <= k.size or width <= k.size:
                raise ConfigurationError(
                    "SSIM: 'height' and 'width' have to exceed the window size"
                    f" {k.size}, got {height}x{width}."
                )
        self._window = WindowedStatistics(self.shape, self.dtype)
        self._stats = LocalStatistics(self.shape, self.dtype, kernel)
        self._fast_stats = (
            LocalStatistics(self.shape, self.dtype, fast_kernel) if fast_path else None
        )
        self._img1_sq = np.empty(self.shape, dtype=self.dtype)
        self._img2_sq = np.empty(self.shape, dtype=self.dtype)
        self._img1_img2 = np.empty(self.shape, dtype=self.dtype)

    def compute(self, original, processed):
        return self.compute_ssim(original, processed)[0]

    def compute_ssim(self, original, processed):
        """Returns (mssim, mcs), each averaged over the channels."""
        original, processed = self._prepare(original, processed)
        return self._compute_maps(original, processed, self._stats)

    def compute_fast(self, original, processed):
        """Mean SSIM over the box window; only the similarity score."""
        if self._fast_stats is None:
            raise RuntimeError("SSIM scorer was built without fast_path")
        original, processed = self._prepare(original, processed)
        return self._compute_maps(original, processed, self._fast_stats)[0]

    def _compute_maps(self, img1, img2, stats):
        kernel = stats.kernel
        smooth = self._window.smooth

        smooth(img1, stats.mu1, kernel)
        smooth(img2, stats.mu2, kernel)

        np.multiply(stats.mu1, stats.mu1, out=stats.mu1_sq)
        np.multiply(stats.mu2, stats.mu2, out=stats.mu2_sq)
        np.multiply(stats.mu1, stats.mu2, out=stats.mu1_mu2)

        np.multiply(img1, img1, out=self._img1_sq)
        np.multiply(img2, img2, out=self._img2_sq)
        np.multiply(img1, img2, out=self._img1_img2)

        smooth(self._img1_sq, stats.sigma1_sq, kernel)
        stats.sigma1_sq -= stats.mu1_sq
        smooth(self._img2_sq, stats.sigma2_sq, kernel)
        stats.sigma2_sq -= stats.mu2_sq
        smooth(self._img1_img2, stats.sigma12, kernel)
        stats.sigma12 -= stats.mu1_mu2

        # cs_map = (2*sigma12 + C2) / (sigma1_sq + sigma2_sq + C2)
        cs_map = stats.sigma12
        cs_map *= 2
        cs_map += self.C2
        denominator = stats.sigma1_sq
        denominator += stats.sigma2_sq
        denominator += self.C2
        np.divide(cs_map, denominator, out=cs_map)

        # ssim_map = (2*mu1_mu2 + C1) * cs_map / (mu1_sq + mu2_sq + C1)
        ssim_map = stats.mu1_mu2
        ssim_map *= 2
        ssim_map += self.C1
        denominator = stats.mu1_sq
        denominator += stats.mu2_sq
        denominator += self.C1
        np.multiply(ssim_map, cs_map, out=ssim_map)
        np.divide(ssim_map, denominator, out=ssim_map)

        return self._channel_mean(ssim_map), self._channel_mean(cs_map)
