#!/usr/bin/env python3
"""Test suite for logging configuration"""

import logging
import os
import tempfile
import unittest
from pyspp.logger import (
    ColoredFormatter, LogContext, LoggerConfig, LogLevel, get_logger, setup_logger,
    setup_logger_from_config, to_level
)


class TestLogLevels(unittest.TestCase):
    """Test level names and the TRACE level"""

    def test_to_level(self):
        self.assertEqual(to_level("trace"), 5)
        self.assertEqual(to_level("DEBUG"), logging.DEBUG)
        self.assertEqual(to_level(logging.WARNING), logging.WARNING)
        with self.assertRaises(ValueError):
            to_level("verbose")

    def test_trace_level(self):
        self.assertEqual(logging.getLevelName(LogLevel.TRACE.value), "TRACE")
        logger = logging.getLogger("pyspp.test.trace")
        with self.assertLogs(logger, level=LogLevel.TRACE.value) as cm:
            logger.trace("residual %d", 3)
        self.assertEqual(cm.records[0].levelname, "TRACE")
        self.assertEqual(cm.records[0].getMessage(), "residual 3")

    def test_colored_formatter_keeps_record(self):
        record = logging.LogRecord("pyspp", logging.INFO, __file__, 1, "msg", None, None)
        text = ColoredFormatter('%(levelname)s %(message)s').format(record)
        self.assertIn("\033[32m", text)
        self.assertEqual(record.levelname, "INFO")


class TestLoggerSetup(unittest.TestCase):
    """Test handler installation"""

    def tearDown(self):
        root = get_logger()
        for handler in root.handlers:
            handler.close()
        root.handlers = []
        root.setLevel(logging.NOTSET)
        logging.getLogger("pyspp.gnss.raim").setLevel(logging.NOTSET)

    def test_setup_logger_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "spp.log")
            logger = setup_logger(level="DEBUG", log_file=path, console=False)
            self.assertEqual(logger.level, logging.DEBUG)
            self.assertEqual(len(logger.handlers), 1)

            logging.getLogger("pyspp.gnss.spp").debug("epoch done")
            logger.handlers[0].flush()
            logger.handlers[0].close()
            with open(path) as f:
                content = f.read()
        self.assertIn("pyspp.gnss.spp - DEBUG - epoch done", content)

    def test_log_context(self):
        logger = setup_logger(level="WARNING", console=False)
        with LogContext("pyspp", "TRACE") as ctx:
            self.assertIs(ctx, logger)
            self.assertEqual(logger.level, 5)
        self.assertEqual(logger.level, logging.WARNING)

    def test_from_config(self):
        config = {
            'default_level': 'WARNING',
            'console': True,
            'module_levels': {'pyspp.gnss.raim': 'DEBUG'},
        }
        root = setup_logger_from_config(config)
        self.assertEqual(root.level, logging.WARNING)
        self.assertEqual(root.handlers[0].level, logging.DEBUG)
        self.assertEqual(logging.getLogger("pyspp.gnss.raim").level, logging.DEBUG)

    def test_module_level_lookup(self):
        cfg = LoggerConfig()
        cfg.set_module_level("pyspp.gnss.raim", "INFO")
        self.assertEqual(cfg.get_level_for_module("pyspp.gnss.raim"), "INFO")
        self.assertEqual(cfg.get_level_for_module("pyspp.gnss.wls"), "INFO")
        self.assertEqual(cfg.default_level, "INFO")


if __name__ == '__main__':
    unittest.main()
