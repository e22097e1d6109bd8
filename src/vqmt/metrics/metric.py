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


class Metric:
    """Base of the frame scorers.

    Frames are float arrays of shape (height, width) or, with channels > 1,
    (height, width, channels).
    """

    def __init__(self, height, width, channels=1, dtype=np.float32):
        if channels < 1:
            raise ValueError(f"channels must be positive, got {channels}")
        self.height = height
        self.width = width
        self.channels = channels
        self.dtype = np.dtype(dtype)
        self.shape = (height, width) if channels == 1 else (height, width, channels)

    def compute(self, original, processed):
        raise NotImplementedError

    def _prepare(self, original, processed):
        """Checks the frame shapes and converts 8-bit input to the working dtype."""
        frames = []
        for name, frame in (("original", original), ("processed", processed)):
            if frame.shape != self.shape:
                raise ValueError(
                    f"{name} frame has shape {frame.shape}, expected {self.shape}"
                )
            frames.append(np.asarray(frame, dtype=self.dtype))
        return frames

    def _channel_mean(self, buf):
        """Spatial mean per channel, then averaged over channels."""
        return float(np.mean(buf.mean(axis=(0, 1), dtype=np.float64)))
