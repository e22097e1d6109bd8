"""Test SSIM and MS-SSIM."""

import unittest

import numpy as np

from vqmt.errors import ConfigurationError
from vqmt.metrics.msssim import MSSSIM, downsample
from vqmt.metrics.ssim import SSIM
from vqmt.metrics.window import BOX_WINDOW, GAUSSIAN_WINDOW

C1 = 6.5025
C2 = 58.5225


def reference_ssim(img1, img2, kernel=GAUSSIAN_WINDOW):
  """Float64 SSIM of single channel frames, straight from the definition."""
  w = np.outer(kernel.weights, kernel.weights)
  k = kernel.size

  def filt(x):
    windows = np.lib.stride_tricks.sliding_window_view(x, (k, k))
    return np.einsum("ijkl,kl->ij", windows, w)

  img1 = img1.astype(np.float64)
  img2 = img2.astype(np.float64)
  mu1, mu2 = filt(img1), filt(img2)
  sigma1_sq = filt(img1 * img1) - mu1 * mu1
  sigma2_sq = filt(img2 * img2) - mu2 * mu2
  sigma12 = filt(img1 * img2) - mu1 * mu2
  cs_map = (2 * sigma12 + C2) / (sigma1_sq + sigma2_sq + C2)
  ssim_map = (2 * mu1 * mu2 + C1) * cs_map / (mu1 * mu1 + mu2 * mu2 + C1)
  return ssim_map.mean(), cs_map.mean()


class SSIMTest(unittest.TestCase):

  def setUp(self):
    super().setUp()
    self.rng = np.random.default_rng(2013)
    self.height = 32
    self.width = 48
    self.img1 = self.rng.uniform(0, 255, (self.height, self.width)).astype(
        np.float32
    )
    noise = self.rng.normal(0, 20, (self.height, self.width))
    self.img2 = np.clip(self.img1 + noise, 0, 255).astype(np.float32)

  def test_identical_frames_score_one(self):
    ssim = SSIM(self.height, self.width)
    mssim, mcs = ssim.compute_ssim(self.img1, self.img1)
    self.assertAlmostEqual(mssim, 1.0, places=6)
    self.assertAlmostEqual(mcs, 1.0, places=6)

  def test_identical_three_channel_frames_score_one(self):
    frame = self.rng.uniform(0, 255, (self.height, self.width, 3)).astype(
        np.float32
    )
    ssim = SSIM(self.height, self.width, channels=3)
    self.assertAlmostEqual(ssim.compute(frame, frame), 1.0, places=6)

  def test_matches_reference(self):
    ssim = SSIM(self.height, self.width)
    mssim, mcs = ssim.compute_ssim(self.img1, self.img2)
    expected_ssim, expected_cs = reference_ssim(self.img1, self.img2)
    self.assertLess(mssim, 1.0)
    self.assertAlmostEqual(mssim, expected_ssim, places=4)
    self.assertAlmostEqual(mcs, expected_cs, places=4)

  def test_is_symmetric(self):
    ssim = SSIM(self.height, self.width)
    self.assertAlmostEqual(
        ssim.compute(self.img1, self.img2),
        ssim.compute(self.img2, self.img1),
        places=5,
    )

  def test_scratch_reuse_does_not_leak_between_frames(self):
    ssim = SSIM(self.height, self.width)
    first = ssim.compute_ssim(self.img1, self.img2)
    ssim.compute_ssim(self.img2, self.img2[::-1].copy())
    self.assertEqual(ssim.compute_ssim(self.img1, self.img2), first)

  def test_three_channels_average_per_channel_scores(self):
    frames1 = self.rng.uniform(0, 255, (self.height, self.width, 3))
    frames2 = np.clip(
        frames1 + self.rng.normal(0, 10 * np.arange(1, 4), frames1.shape), 0, 255
    )
    frames1 = frames1.astype(np.float32)
    frames2 = frames2.astype(np.float32)
    three = SSIM(self.height, self.width, channels=3)
    one = SSIM(self.height, self.width)
    per_channel = [
        one.compute_ssim(
            np.ascontiguousarray(frames1[:, :, c]),
            np.ascontiguousarray(frames2[:, :, c]),
        )
        for c in range(3)
    ]
    mssim, mcs = three.compute_ssim(frames1, frames2)
    self.assertAlmostEqual(mssim, np.mean([s for s, _ in per_channel]), places=5)
    self.assertAlmostEqual(mcs, np.mean([c for _, c in per_channel]), places=5)

  def test_accepts_8bit_input(self):
    ssim = SSIM(self.height, self.width)
    img1 = self.img1.astype(np.uint8)
    img2 = self.img2.astype(np.uint8)
    self.assertEqual(
        ssim.compute(img1, img2),
        ssim.compute(img1.astype(np.float32), img2.astype(np.float32)),
    )

  def test_fast_path(self):
    ssim = SSIM(self.height, self.width, fast_path=True)
    self.assertAlmostEqual(ssim.compute_fast(self.img1, self.img1), 1.0, places=6)
    expected, _ = reference_ssim(self.img1, self.img2, BOX_WINDOW)
    self.assertAlmostEqual(
        ssim.compute_fast(self.img1, self.img2), expected, places=4
    )

  def test_fast_path_needs_its_buffers(self):
    ssim = SSIM(self.height, self.width)
    with self.assertRaises(RuntimeError):
      ssim.compute_fast(self.img1, self.img2)

  def test_frame_must_exceed_window(self):
    with self.assertRaises(ConfigurationError):
      SSIM(11, 40)
    with self.assertRaises(ConfigurationError):
      SSIM(40, 8, fast_path=True)

  def test_rejects_mismatched_frames(self):
    ssim = SSIM(self.height, self.width)
    with self.assertRaises(ValueError):
      ssim.compute(self.img1, self.img1[:, :-1])


class MSSSIMTest(unittest.TestCase):

  def setUp(self):
    super().setUp()
    self.rng = np.random.default_rng(16)
    self.size = 192
    base = self.rng.uniform(0, 255, (self.size // 8, self.size // 8))
    # smooth content so every pyramid level keeps structure
    self.img1 = np.kron(base, np.ones((8, 8))).astype(np.float32)
    noise = self.rng.normal(0, 8, self.img1.shape)
    self.img2 = np.clip(self.img1 + noise, 0, 255).astype(np.float32)

  def test_downsample_is_2x2_mean(self):
    src = np.arange(16, dtype=np.float32).reshape(4, 4)
    dst = np.empty((2, 2), dtype=np.float32)
    downsample(src, dst)
    np.testing.assert_allclose(dst, [[2.5, 4.5], [10.5, 12.5]])

  def test_identical_frames_score_one(self):
    msssim = MSSSIM(self.size, self.size)
    self.assertAlmostEqual(msssim.compute(self.img1, self.img1), 1.0, places=5)
    self.assertAlmostEqual(msssim.ssim, 1.0, places=6)

  def test_first_level_is_ssim(self):
    msssim = MSSSIM(self.size, self.size)
    score = msssim.compute(self.img1, self.img2)
    ssim = SSIM(self.size, self.size).compute(self.img1, self.img2)
    self.assertEqual(msssim.ssim, ssim)
    self.assertGreater(score, 0.0)
    self.assertLess(score, 1.0)

  def test_combines_levels_with_weights(self):
    msssim = MSSSIM(self.size, self.size)
    score = msssim.compute(self.img1, self.img2)
    expected = np.prod(msssim.mcs[:-1] ** np.array(msssim.weights[:-1]))
    expected *= msssim.mssim[-1] ** msssim.weights[-1]
    self.assertAlmostEqual(score, float(expected), places=10)

  def test_size_must_be_multiple_of_16(self):
    with self.assertRaisesRegex(ConfigurationError, "multiple of 16"):
      MSSSIM(200, 192)

  def test_coarsest_level_must_exceed_window(self):
    with self.assertRaises(ConfigurationError):
      MSSSIM(176, 192)


if __name__ == "__main__":
  unittest.main()
