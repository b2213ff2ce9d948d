"""
Logging for bidcalc.

All loggers hang off the "bidcalc" namespace (bidcalc.settlement,
bidcalc.config, bidcalc.cli). Library use never touches the disk: the
first get_logger() call installs a colored stderr handler only. The CLI
reconfigures through setup_logging() and adds a bidcalc.log file when
--log-dir (or BIDCALC_LOG_DIR) is set. Records go to stderr because
stdout carries the JSON settlement output.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog


class BidcalcLogger:
    """Owns the handlers of the "bidcalc" logger; configured at most once until reset()"""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
    ):
        """
        Install handlers on the "bidcalc" logger. No-op once initialized.

        Args:
            level: Level for the logger and its handlers
            log_dir: Where bidcalc.log is written; ./logs if None
            log_to_file: Add the file handler (off for implicit setup)
        """
        if cls._initialized:
            return

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(exist_ok=True, parents=True)

        package_logger = logging.getLogger("bidcalc")
        package_logger.setLevel(level)
        package_logger.handlers.clear()

        # Colored stderr handler
        console_handler = colorlog.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
        console_handler.setFormatter(console_formatter)
        package_logger.addHandler(console_handler)

        if log_to_file and cls._log_dir:
            file_handler = logging.FileHandler(cls._log_dir / "bidcalc.log")
            file_handler.setLevel(level)
            file_formatter = logging.Formatter(
                "%(asctime)s [%(name)s] %(levelname)-8s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            file_handler.setFormatter(file_formatter)
            package_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def reset(cls):
        """Close and drop handlers, clear the level; the next setup() starts fresh."""
        package_logger = logging.getLogger("bidcalc")
        for handler in package_logger.handlers:
            handler.close()
        package_logger.handlers.clear()
        package_logger.setLevel(logging.NOTSET)
        cls._initialized = False
        cls._log_dir = None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Return bidcalc.<name>, running the implicit console-only setup if needed."""
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"bidcalc.{name}")


# Convenience functions
def get_logger(name: str) -> logging.Logger:
    """Logger for a bidcalc subsystem (e.g. "settlement" -> bidcalc.settlement)"""
    return BidcalcLogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Reconfigure from scratch (used by the CLI group callback)"""
    BidcalcLogger.reset()
    BidcalcLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
