"""Test logging setup."""

import logging
import pathlib
import tempfile
import unittest

from vqmt.utils import setup_logging


class SetupLoggingTest(unittest.TestCase):

  def tearDown(self):
    setup_logging(0)
    super().tearDown()

  def test_level_index(self):
    logger = setup_logging(4)
    self.assertEqual(logger.name, "VQMT")
    self.assertEqual(logger.level, logging.INFO)
    self.assertEqual(len(logger.handlers), 1)

  def test_disabled(self):
    logger = setup_logging(0)
    self.assertFalse(logging.getLogger("VQMT.VideoYUV").isEnabledFor(logging.CRITICAL))
    self.assertIsInstance(logger.handlers[0], logging.NullHandler)

  def test_log_file(self):
    with tempfile.TemporaryDirectory() as temp_dir:
      log_file = pathlib.Path(temp_dir) / "logs" / "vqmt.log"
      logger = setup_logging(5, log_file=str(log_file))
      logging.getLogger("VQMT.Report").debug("hello")
      for handler in logger.handlers:
        handler.flush()
      self.assertIn("VQMT.Report - DEBUG - hello", log_file.read_text())
      setup_logging(0)

  def test_invalid_level(self):
    with self.assertRaises(ValueError):
      setup_logging(6)


if __name__ == "__main__":
  unittest.main()
