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
import math

import numpy as np

from vqmt.config.table import PEAK_VALUE
from vqmt.metrics.metric import Metric


class PSNR(Metric):
    def __init__(self, height, width, channels=1, dtype=np.float32):
        super().__init__(height, width, channels, dtype)
        self._diff = np.empty(self.shape, dtype=self.dtype)

    def mse(self, original, processed):
        original, processed = self._prepare(original, processed)
        np.subtract(original, processed, out=self._diff)
        np.multiply(self._diff, self._diff, out=self._diff)
        return self._channel_mean(self._diff)

    def compute(self, original, processed):
        """10 * log10(255^2 / MSE); identical frames give math.inf."""
        mse = self.mse(original, processed)
        if mse == 0.0:
            return math.inf
        return 10.0 * math.log10(PEAK_VALUE * PEAK_VALUE / mse)
