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
import math

import numpy as np
import pandas as pd

from vqmt.config.table import (
    CSV_FLOAT_FORMAT,
    CSV_HEADER,
    LOGGER_NAME,
    SUMMARY_PERCENTILES,
)

subloggername = "Report"
loggername = LOGGER_NAME + "." + "%s" % subloggername
logger = logging.getLogger(loggername)


def percentile(sorted_scores, p):
    """Percentile p (0..1) of ascending scores.

    With rank r = n * p, an integral r gives the mean of the values at
    1-based ranks r and r + 1; otherwise the value at rank ceil(r).
    """
    n = len(sorted_scores)
    if n == 0:
        raise ValueError("percentile of an empty sequence")
    rank = n * p
    nearest = round(rank)
    if math.isclose(rank, nearest, rel_tol=0.0, abs_tol=1e-9):
        lower = min(max(int(nearest), 1), n)
        upper = min(lower + 1, n)
        return (sorted_scores[lower - 1] + sorted_scores[upper - 1]) / 2
    return sorted_scores[min(math.ceil(rank), n) - 1]


def summarize(scores):
    """Returns the summary rows {label: value} written after the frames."""
    scores = np.asarray(scores, dtype=np.float64)
    summary = {}
    if len(scores) == 0:
        summary["average"] = math.nan
        summary["standard deviation"] = math.nan
        for label in SUMMARY_PERCENTILES:
            summary[label] = math.nan
        return summary

    with np.errstate(invalid="ignore"):
        summary["average"] = float(np.mean(scores))
        # sample deviation, undefined for a single frame
        summary["standard deviation"] = (
            float(np.std(scores, ddof=1)) if len(scores) > 1 else math.nan
        )
    sorted_scores = np.sort(scores)
    for label, p in SUMMARY_PERCENTILES.items():
        summary[label] = float(percentile(sorted_scores, p))
    return summary


class ResultCollector:
    """Per-frame scores of one metric, recorded in frame order."""

    def __init__(self, metric_kind, num_frames):
        self.metric_kind = metric_kind
        self.num_frames = num_frames
        self._values = np.full(num_frames, np.nan)
        self._count = 0

    def __len__(self):
        return self._count

    def record(self, frame, value):
        if frame != self._count:
            raise ValueError(
                f"{self.metric_kind.name}: expected score of frame {self._count},"
                f" got frame {frame}"
            )
        if frame >= self.num_frames:
            raise ValueError(
                f"{self.metric_kind.name}: frame {frame} is beyond the"
                f" {self.num_frames} configured frames"
            )
        self._values[frame] = value
        self._count += 1

    @property
    def scores(self):
        return self._values[: self._count]

    def summary(self):
        return summarize(self.scores)


def get_report_file(output_prefix, metric_kind):
    return f"{output_prefix}_{metric_kind.value}.csv"


def write_report(collector, output_prefix):
    """Writes frame,value rows followed by the summary rows; returns the path."""
    summary = collector.summary()
    labels = [str(frame) for frame in range(len(collector))] + list(summary)
    values = list(collector.scores) + list(summary.values())
    df = pd.DataFrame({CSV_HEADER[0]: labels, CSV_HEADER[1]: values})
    path = get_report_file(output_prefix, collector.metric_kind)
    df.to_csv(path, index=False, float_format=CSV_FLOAT_FORMAT, na_rep="nan")
    logger.info(
        "%s: %d frame(s), average = %2.5f, written to %s",
        collector.metric_kind.name,
        len(collector),
        summary["average"],
        path,
    )
    return path
