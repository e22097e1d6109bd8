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
# SSIM stabilization constants, (0.01 * 255)^2 and (0.03 * 255)^2
SSIM_C1 = 6.5025
SSIM_C2 = 58.5225

GAUSSIAN_KERNEL_SIZE = 11
GAUSSIAN_KERNEL_SIGMA = 1.5
BOX_KERNEL_SIZE = 8

PEAK_VALUE = 255.0

MSSSIM_WEIGHTS = (0.0448, 0.2856, 0.3001, 0.2363, 0.1333)
MSSSIM_SIZE_MULTIPLE = 16
FASTSSIM_SIZE_MULTIPLE = 8

CSV_HEADER = ("frame", "value")
CSV_FLOAT_FORMAT = "%.6f"
SUMMARY_PERCENTILES = {
    "50th percentile": 0.50,
    "90th percentile": 0.90,
    "95th percentile": 0.95,
    "99th percentile": 0.99,
}

LOGGER_NAME = "VQMT"
LOG_LEVELS = ["NONE", "CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]
DEFAULT_LOG_LEVEL = 3
