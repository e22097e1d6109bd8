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
import sys

import numpy as np
from termcolor import cprint

import vqmt.config.user as user
from vqmt.config.table import FASTSSIM_SIZE_MULTIPLE, LOGGER_NAME, MSSSIM_SIZE_MULTIPLE
from vqmt.errors import ConfigurationError
from vqmt.metrics import MetricKind
from vqmt.metrics.msssim import MSSSIM
from vqmt.metrics.psnr import PSNR
from vqmt.metrics.ssim import SSIM
from vqmt.report import ResultCollector, write_report
from vqmt.video.yuv_reader import VideoYUV

subloggername = "ComputeMetrics"
loggername = LOGGER_NAME + "." + "%s" % subloggername
logger = logging.getLogger(loggername)


class RunResult:
    def __init__(self, frames_processed, num_frames, collectors, report_files):
        self.frames_processed = frames_processed
        self.num_frames = num_frames
        self.collectors = collectors
        self.report_files = report_files

    @property
    def complete(self):
        return self.frames_processed == self.num_frames


def parse_metric_names(metric_names):
    """Maps names to MetricKind, dropping duplicates, in MetricKind order."""
    selected = {MetricKind.from_name(name) for name in metric_names}
    if not selected:
        raise ConfigurationError("No metric selected.")
    return [kind for kind in MetricKind if kind in selected]


def validate_geometry(height, width, metric_kinds):
    if height <= 0 or width <= 0:
        raise ConfigurationError(
            f"'height' and 'width' have to be positive, got {height}x{width}."
        )
    if MetricKind.MSSSIM in metric_kinds and (
        height % MSSSIM_SIZE_MULTIPLE or width % MSSSIM_SIZE_MULTIPLE
    ):
        raise ConfigurationError(
            "MS-SSIM: 'height' and 'width' have to be multiple of %d."
            % MSSSIM_SIZE_MULTIPLE
        )
    if MetricKind.FASTSSIM in metric_kinds and (
        height % FASTSSIM_SIZE_MULTIPLE or width % FASTSSIM_SIZE_MULTIPLE
    ):
        raise ConfigurationError(
            "FASTSSIM: 'height' and 'width' have to be multiple of %d."
            % FASTSSIM_SIZE_MULTIPLE
        )


def build_scorers(height, width, metric_kinds):
    scorers = {}
    if MetricKind.PSNR in metric_kinds:
        scorers[MetricKind.PSNR] = PSNR(height, width)
    if MetricKind.YUVPSNR in metric_kinds:
        scorers[MetricKind.YUVPSNR] = PSNR(height, width, channels=3)
    # SSIM comes for free with MS-SSIM
    if MetricKind.SSIM in metric_kinds and MetricKind.MSSSIM not in metric_kinds:
        scorers[MetricKind.SSIM] = SSIM(height, width)
    if MetricKind.YUVSSIM in metric_kinds:
        scorers[MetricKind.YUVSSIM] = SSIM(height, width, channels=3)
    if MetricKind.MSSSIM in metric_kinds:
        scorers[MetricKind.MSSSIM] = MSSSIM(height, width)
    if MetricKind.FASTSSIM in metric_kinds:
        scorers[MetricKind.FASTSSIM] = SSIM(height, width, fast_path=True)
    return scorers


def score_frame(scorers, luma_pair, yuv_pair):
    results = {}
    for kind in (MetricKind.PSNR, MetricKind.SSIM):
        if kind in scorers:
            results[kind] = scorers[kind].compute(*luma_pair)
    for kind in (MetricKind.YUVPSNR, MetricKind.YUVSSIM):
        if kind in scorers:
            results[kind] = scorers[kind].compute(*yuv_pair)
    if MetricKind.MSSSIM in scorers:
        msssim = scorers[MetricKind.MSSSIM]
        results[MetricKind.MSSSIM] = msssim.compute(*luma_pair)
        results[MetricKind.SSIM] = msssim.ssim
    if MetricKind.FASTSSIM in scorers:
        results[MetricKind.FASTSSIM] = scorers[MetricKind.FASTSSIM].compute_fast(
            *luma_pair
        )
    return results


def compute_metrics(original, processed, num_frames, collectors):
    """Scores frames 0..num_frames-1 of the two sources into collectors.

    Stops at the first frame that cannot be read from either source and
    returns the number of frames scored.
    """
    height, width = original.height, original.width
    if (processed.height, processed.width) != (height, width):
        raise ConfigurationError(
            f"original is {width}x{height} but processed is"
            f" {processed.width}x{processed.height}"
        )
    metric_kinds = list(collectors)
    scorers = build_scorers(height, width, metric_kinds)
    use_yuv = any(kind.uses_yuv for kind in metric_kinds)

    luma_pair = (
        np.empty((height, width), dtype=np.float32),
        np.empty((height, width), dtype=np.float32),
    )
    yuv_pair = None
    if use_yuv:
        yuv_pair = (
            np.empty((height, width, 3), dtype=np.float32),
            np.empty((height, width, 3), dtype=np.float32),
        )

    for frame in range(num_frames):
        logger.info("Computing metrics for frame: No.%d", frame)
        for name, source, idx in (("original", original, 0), ("processed", processed, 1)):
            if not source.read_one_frame():
                logger.error(
                    "ran out of %s frames to load: %d/%d", name, frame, num_frames
                )
                return frame
            source.get_luma(luma_pair[idx])
            if use_yuv:
                source.get_yuv(yuv_pair[idx])

        results = score_frame(scorers, luma_pair, yuv_pair)
        for kind, collector in collectors.items():
            collector.record(frame, results[kind])
        logger.debug(
            "frame %d result: %s",
            frame,
            ", ".join("%s = %.6f" % (kind.name, results[kind]) for kind in collectors),
        )
    return num_frames


def run(
    original_file,
    processed_file,
    height,
    width,
    num_frames,
    chroma_format,
    output_prefix,
    metric_names,
):
    metric_kinds = parse_metric_names(metric_names)
    validate_geometry(height, width, metric_kinds)
    if num_frames <= 0:
        raise ConfigurationError(
            f"number of frames has to be positive, got {num_frames}."
        )
    cprint(
        f"Computing {', '.join(kind.name for kind in metric_kinds)} on"
        f" {num_frames} frames of {width}x{height}:",
        attrs=["bold"],
    )
    collectors = {kind: ResultCollector(kind, num_frames) for kind in metric_kinds}
    with VideoYUV(
        original_file, height, width, num_frames, chroma_format
    ) as original, VideoYUV(
        processed_file, height, width, num_frames, chroma_format
    ) as processed:
        frames_processed = compute_metrics(original, processed, num_frames, collectors)

    report_files = [
        write_report(collector, output_prefix) for collector in collectors.values()
    ]
    result = RunResult(frames_processed, num_frames, collectors, report_files)
    if result.complete:
        cprint("Done computing metrics!\n", "green", attrs=["bold"])
    else:
        cprint(
            f"Stopped after {frames_processed}/{num_frames} frames, reports"
            " cover the frames computed so far.",
            "red",
            attrs=["bold"],
            file=sys.stderr,
        )
    return result


def run_from_config(user_config_file="parameters.yaml"):
    (
        original_file,
        processed_file,
        height,
        width,
        num_frames,
        chroma_format,
    ) = user.read_config_video(user_config_file)
    output_prefix, metric_names = user.read_config_output(user_config_file)
    return run(
        original_file,
        processed_file,
        height,
        width,
        num_frames,
        chroma_format,
        output_prefix,
        metric_names,
    )


if __name__ == "__main__":
    run_from_config()
