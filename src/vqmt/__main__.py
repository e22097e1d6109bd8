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
import argparse
import sys

from termcolor import cprint

from vqmt.config.table import DEFAULT_LOG_LEVEL, LOG_LEVELS
from vqmt.errors import VqmtError
from vqmt.metrics import MetricKind
from vqmt.tasks.compute_metrics import run
from vqmt.utils import setup_logging
from vqmt.video.yuv_reader import ChromaFormat


def ParseArguments(raw_args):
    parser = argparse.ArgumentParser(
        prog="vqmt",
        description="Frame by frame PSNR and SSIM between two raw YUV videos.",
        epilog="available metrics: "
        + ", ".join(m.name for m in MetricKind)
        + ". Output files are named <OUTPUT>_<metric>.csv.",
    )
    parser.add_argument("original", help="original raw YUV video, 8 bits per sample")
    parser.add_argument(
        "processed", help="processed raw YUV video, 8 bits per sample"
    )
    parser.add_argument("height", type=int, help="height of the video")
    parser.add_argument("width", type=int, help="width of the video")
    parser.add_argument("frames", type=int, help="number of frames to process")
    parser.add_argument(
        "chroma",
        type=int,
        choices=[c.value for c in ChromaFormat],
        help="chroma subsampling: "
        + ", ".join(f"{c.value}: {c.name}" for c in ChromaFormat),
    )
    parser.add_argument("output", help="prefix of the output file(s)")
    parser.add_argument("metrics", nargs="+", help="metric(s) to compute")
    parser.add_argument(
        "-l",
        "--LoggingLevel",
        dest="LogLevel",
        type=int,
        default=DEFAULT_LOG_LEVEL,
        choices=range(len(LOG_LEVELS)),
        metavar="",
        help="logging level: 0:No Logging, 1: Critical, 2: Error,"
        " 3: Warning, 4: Info, 5: Debug",
    )
    parser.add_argument(
        "--LogFile", dest="LogFile", default=None, metavar="", help="also log to file"
    )
    return parser.parse_args(raw_args)


def main(raw_args=None):
    args = ParseArguments(sys.argv[1:] if raw_args is None else raw_args)
    setup_logging(args.LogLevel, log_file=args.LogFile)
    try:
        result = run(
            args.original,
            args.processed,
            args.height,
            args.width,
            args.frames,
            args.chroma,
            args.output,
            args.metrics,
        )
    except VqmtError as e:
        cprint(f"Error: {e}", "red", attrs=["bold"], file=sys.stderr)
        return 1
    return 0 if result.complete else 1


if __name__ == "__main__":
    sys.exit(main())
