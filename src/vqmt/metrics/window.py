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

import numpy as np
from scipy import ndimage

from vqmt.config.table import (
    BOX_KERNEL_SIZE,
    GAUSSIAN_KERNEL_SIGMA,
    GAUSSIAN_KERNEL_SIZE,
)


class KernelKind(enum.Enum):
    GAUSSIAN = "gaussian"
    BOX = "box"


class WindowKernel:
    """Square separable smoothing window.

    A Gaussian window is anchored at its centre sample, a box window at its
    top-left sample. Both emit only fully supported positions, so the valid
    extent of an H x W input is (H - (size - 1), W - (size - 1)).
    """

    def __init__(self, kind, size, sigma=None):
        kind = KernelKind(kind)
        if size < 1:
            raise ValueError(f"kernel size must be positive, got {size}")
        if kind == KernelKind.GAUSSIAN:
            if size % 2 == 0:
                raise ValueError(f"gaussian kernel size must be odd, got {size}")
            if sigma is None or sigma <= 0:
                raise ValueError(f"gaussian kernel needs sigma > 0, got {sigma}")
        self.kind = kind
        self.size = size
        self.sigma = sigma
        self.weights = self._make_weights()

    def __repr__(self):
        if self.kind == KernelKind.GAUSSIAN:
            return f"WindowKernel(gaussian, {self.size}, sigma={self.sigma})"
        return f"WindowKernel(box, {self.size})"

    def _make_weights(self):
        if self.kind == KernelKind.BOX:
            return np.full(self.size, 1.0 / self.size)
        coords = np.arange(self.size, dtype=np.float64) - (self.size - 1) / 2.0
        g = np.exp(-(coords**2) / (2.0 * self.sigma**2))
        return g / g.sum()

    @property
    def origin(self):
        # scipy places the filter centre at size // 2 + origin
        if self.kind == KernelKind.BOX:
            return -(self.size // 2)
        return 0

    @property
    def crop(self):
        """Returns (top, left) offset of the valid region in the filtered frame."""
        if self.kind == KernelKind.BOX:
            return 0, 0
        invalid = (self.size - 1) // 2
        return invalid, invalid


GAUSSIAN_WINDOW = WindowKernel(
    KernelKind.GAUSSIAN, GAUSSIAN_KERNEL_SIZE, GAUSSIAN_KERNEL_SIGMA
)
BOX_WINDOW = WindowKernel(KernelKind.BOX, BOX_KERNEL_SIZE)


def valid_shape(shape, kernel):
    height, width = shape[0], shape[1]
    if height < kernel.size or width < kernel.size:
        raise ValueError(
            f"{height}x{width} frame is smaller than the {kernel.size}x{kernel.size} window"
        )
    return (height - (kernel.size - 1), width - (kernel.size - 1)) + tuple(shape[2:])


class WindowedStatistics:
    """Filter-then-crop engine used for local means, variances and covariance.

    The two full-size scratch buffers are allocated once; smooth() writes
    the valid region into a destination owned by the caller.
    """

    def __init__(self, shape, dtype=np.float32):
        self.shape = tuple(shape)
        self.dtype = np.dtype(dtype)
        self._rows = np.empty(self.shape, dtype=self.dtype)
        self._full = np.empty(self.shape, dtype=self.dtype)

    def smooth(self, src, dst, kernel):
        if src.shape != self.shape:
            raise ValueError(f"input has shape {src.shape}, expected {self.shape}")
        expected = valid_shape(self.shape, kernel)
        if dst.shape != expected:
            raise ValueError(f"output has shape {dst.shape}, expected {expected}")
        # mirror is the reflect-101 border; it never reaches the valid region
        ndimage.correlate1d(
            src,
            kernel.weights,
            axis=0,
            output=self._rows,
            mode="mirror",
            origin=kernel.origin,
        )
        ndimage.correlate1d(
            self._rows,
            kernel.weights,
            axis=1,
            output=self._full,
            mode="mirror",
            origin=kernel.origin,
        )
        top, left = kernel.crop
        np.copyto(
            dst, self._full[top : top + expected[0], left : left + expected[1]]
        )
        return dst
