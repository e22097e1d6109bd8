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
import logging
import sys

import numpy as np

from vqmt.config.table import LOGGER_NAME
from vqmt.errors import ConfigurationError, StreamError

subloggername = "VideoYUV"
loggername = LOGGER_NAME + "." + "%s" % subloggername
logger = logging.getLogger(loggername)


class ChromaFormat(enum.IntEnum):
    YUV400 = 0
    YUV420 = 1
    YUV422 = 2
    YUV444 = 3


class VideoYUV:
    """Sequential reader of a raw planar 8-bit YUV file.

    One frame is held at a time in a single raw block split into luma and
    two chroma planes. The interleaved (H, W, 3) view is rebuilt lazily, at
    most once per frame, and is invalidated by every call to read_one_frame.
    Passing "-" as filename reads from stdin.
    """

    def __init__(self, filename, height, width, num_frames, chroma_format):
        try:
            chroma_format = ChromaFormat(chroma_format)
        except ValueError:
            raise ConfigurationError(
                f"Unknown chroma format {chroma_format!r}, expected one of "
                + ", ".join(f"{c.value} ({c.name})" for c in ChromaFormat)
            ) from None
        if height <= 0 or width <= 0:
            raise ConfigurationError(
                f"'height' and 'width' have to be positive, got {height}x{width}."
            )
        if chroma_format == ChromaFormat.YUV420 and (height % 2 or width % 2):
            raise ConfigurationError(
                "YUV420: 'height' and 'width' have to be even numbers."
            )
        if chroma_format == ChromaFormat.YUV422 and width % 2:
            raise ConfigurationError("YUV422: 'width' has to be an even number.")

        self._filename = filename
        self._height = height
        self._width = width
        self._num_frames = num_frames
        self._chroma_format = chroma_format

        if chroma_format == ChromaFormat.YUV400:
            chroma_height, chroma_width = 0, 0
        elif chroma_format == ChromaFormat.YUV420:
            chroma_height, chroma_width = height >> 1, width >> 1
        elif chroma_format == ChromaFormat.YUV422:
            chroma_height, chroma_width = height, width >> 1
        else:
            chroma_height, chroma_width = height, width
        self._comp_height = (height, chroma_height, chroma_height)
        self._comp_width = (width, chroma_width, chroma_width)
        self._comp_size = tuple(
            h * w for h, w in zip(self._comp_height, self._comp_width)
        )
        self._frame_size = sum(self._comp_size)

        if filename == "-":
            self._file = sys.stdin.buffer
            self._owns_file = False
        else:
            try:
                self._file = open(filename, "rb")
            except OSError as e:
                raise StreamError(
                    f"cannot open input file ({filename}): {e.strerror}"
                ) from e
            self._owns_file = True

        # raw frame storage, planes are views into it
        self._data = np.empty(self._frame_size, dtype=np.uint8)
        self._planes = []
        offset = 0
        for h, w, size in zip(self._comp_height, self._comp_width, self._comp_size):
            self._planes.append(self._data[offset : offset + size].reshape(h, w))
            offset += size

        self._yuv = np.zeros((height, width, 3), dtype=np.uint8)
        self._yuv_ready = False
        self._frame_ready = False
        self._frames_read = 0

        logger.debug(
            "opened %s: %dx%d %s, %d bytes per frame",
            filename,
            width,
            height,
            chroma_format.name,
            self._frame_size,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        if self._file is not None and self._owns_file:
            self._file.close()
        self._file = None

    @property
    def filename(self):
        return self._filename

    @property
    def height(self):
        return self._height

    @property
    def width(self):
        return self._width

    @property
    def num_frames(self):
        return self._num_frames

    @property
    def chroma_format(self):
        return self._chroma_format

    @property
    def comp_height(self):
        return self._comp_height

    @property
    def comp_width(self):
        return self._comp_width

    @property
    def comp_size(self):
        return self._comp_size

    @property
    def frame_size(self):
        return self._frame_size

    @property
    def frames_read(self):
        return self._frames_read

    def read_one_frame(self):
        """Reads the next frame into the raw storage.

        Returns False on end of stream or short read; the frame is then
        unavailable and the getters raise StreamError.
        """
        self._yuv_ready = False
        self._frame_ready = False
        if self._file is None:
            raise StreamError(f"{self._filename} is closed")

        view = memoryview(self._data)
        nread = 0
        while nread < self._frame_size:
            n = self._file.readinto(view[nread:])
            if not n:
                break
            nread += n
        if nread != self._frame_size:
            logger.error(
                "readOneFrame: cannot read %d bytes from input file %s, "
                "unexpected EOF (got %d).",
                self._frame_size,
                self._filename,
                nread,
            )
            return False

        self._frame_ready = True
        self._frames_read += 1
        return True

    def get_luma(self, out=None, dtype=None):
        return self.get_component(0, out, dtype)

    def get_u(self, out=None, dtype=None):
        return self.get_component(1, out, dtype)

    def get_v(self, out=None, dtype=None):
        return self.get_component(2, out, dtype)

    def get_component(self, index, out=None, dtype=None):
        """Copies plane index (0: luma, 1 and 2: chroma) into out.

        The samples are converted to out.dtype. Without out, a new array of
        dtype (uint8 by default) is returned.
        """
        if index not in (0, 1, 2):
            raise ValueError(f"component index must be 0, 1 or 2, got {index}")
        self._check_frame()
        return self._copy(self._planes[index], out, dtype)

    def get_yuv(self, out=None, dtype=None):
        """Copies the interleaved [Y, U, V] view of the frame into out.

        Subsampled chroma is upsampled by sample replication.
        """
        self._check_frame()
        if not self._yuv_ready:
            self._build_yuv()
        return self._copy(self._yuv, out, dtype)

    def _check_frame(self):
        if not self._frame_ready:
            raise StreamError(
                f"{self._filename}: no frame available, "
                "read_one_frame() did not succeed"
            )

    def _copy(self, src, out, dtype):
        if out is None:
            return src.astype(dtype or np.uint8)
        if out.shape != src.shape:
            raise ValueError(
                f"output buffer has shape {out.shape}, expected {src.shape}"
            )
        np.copyto(out, src, casting="unsafe")
        return out

    def _build_yuv(self):
        luma, u, v = self._planes
        yuv = self._yuv
        yuv[:, :, 0] = luma
        if self._chroma_format == ChromaFormat.YUV400:
            yuv[:, :, 1:] = 0
        elif self._chroma_format == ChromaFormat.YUV420:
            # [i, a, j, b] addresses sample (2i + a, 2j + b)
            blocks = yuv.reshape(self._height >> 1, 2, self._width >> 1, 2, 3)
            blocks[..., 1] = u[:, None, :, None]
            blocks[..., 2] = v[:, None, :, None]
        elif self._chroma_format == ChromaFormat.YUV422:
            pairs = yuv.reshape(self._height, self._width >> 1, 2, 3)
            pairs[..., 1] = u[:, :, None]
            pairs[..., 2] = v[:, :, None]
        else:
            yuv[:, :, 1] = u
            yuv[:, :, 2] = v
        self._yuv_ready = True
