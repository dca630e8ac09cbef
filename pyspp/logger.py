# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for pyspp.

Library modules log through ``logging.getLogger(__name__)`` and never
install handlers. Applications call :func:`setup_logger` or
:func:`setup_logger_from_config` to route the ``pyspp`` hierarchy to the
console and/or a file.

Levels used by the estimators:
    TRACE: per-satellite residuals and corrections
    DEBUG: per-iteration state, rejected solutions
    INFO: RAIM exclusions
    WARNING: malformed input such as duplicated observations
"""

import logging
import sys
from enum import Enum
from typing import Optional, Union

ROOT_LOGGER = "pyspp"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LogLevel(Enum):
    """Log levels of pyspp"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def trace(self, message, *args, **kwargs):
    """Log at TRACE level"""
    if self.isEnabledFor(LogLevel.TRACE.value):
        self._log(LogLevel.TRACE.value, message, args, **kwargs)


logging.Logger.trace = trace


def to_level(level: Union[str, int]) -> int:
    """Numeric log level from a name such as ``"trace"`` or a number"""
    if isinstance(level, int):
        return level
    try:
        return LogLevel[level.upper()].value
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


class ColoredFormatter(logging.Formatter):
    """Colored log formatter"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # colour a copy so file handlers sharing the record stay plain
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = ROOT_LOGGER,
                 level: Union[str, int] = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Setup logger with specified configuration

    Parameters:
    -----------
    name : str
        Logger name, ``"pyspp"`` covers the whole library
    level : str or int
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable console output

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    lvl = to_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(lvl)
    logger.handlers = []

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(lvl)
        console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(lvl)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get logger by name"""
    return logging.getLogger(name)


class LogContext:
    """Context manager for temporary log level change"""

    def __init__(self, logger: Union[logging.Logger, str], level: Union[str, int]):
        self.logger = logging.getLogger(logger) if isinstance(logger, str) else logger
        self.new_level = to_level(level)
        self.old_level = None

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)


class LoggerConfig:
    """Logger configuration manager for module-specific log levels"""

    def __init__(self):
        self.module_levels = {}
        self.default_level = "INFO"
        self.log_file = None
        self.console = True

    def set_module_level(self, module_name: str, level: Union[str, int]):
        """Set log level for a module such as ``pyspp.gnss.raim``"""
        self.module_levels[module_name] = level
        logging.getLogger(module_name).setLevel(to_level(level))

    def get_level_for_module(self, module_name: str):
        """Get log level for specific module"""
        return self.module_levels.get(module_name, self.default_level)

    def configure_from_dict(self, config: dict):
        """Configure from dictionary"""
        self.default_level = config.get('default_level', self.default_level)
        self.log_file = config.get('log_file', self.log_file)
        self.console = config.get('console', self.console)
        for module, level in config.get('module_levels', {}).items():
            self.set_module_level(module, level)

    def setup_all_loggers(self):
        """Install handlers on the library root logger.

        Module loggers only get their level; their records propagate to the
        root handlers, so the handler level follows the most verbose module.
        """
        levels = [to_level(self.default_level)]
        levels += [to_level(lvl) for lvl in self.module_levels.values()]
        root = setup_logger(ROOT_LOGGER, min(levels), self.log_file, self.console)
        root.setLevel(to_level(self.default_level))
        for module, level in self.module_levels.items():
            logging.getLogger(module).setLevel(to_level(level))
        return root


def setup_logger_from_config(config: dict) -> logging.Logger:
    """Setup loggers from configuration dictionary

    Example config:
    {
        'default_level': 'INFO',
        'log_file': 'spp.log',
        'console': True,
        'module_levels': {
            'pyspp.gnss.raim': 'DEBUG',
            'pyspp.gnss.residuals': 'TRACE',
        }
    }
    """
    cfg = LoggerConfig()
    cfg.configure_from_dict(config)
    return cfg.setup_all_loggers()
