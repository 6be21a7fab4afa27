"""
Logger module with auto-cleanup of old log files.

Library modules only call get_logger(); handlers are attached once by the
entry point (main.py) through setup_logger().
"""
import logging
import time
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "edi_engine"


def setup_logger(log_dir: str = "logs", log_retention_days: int = 10) -> logging.Logger:
    """
    Set up logging with file and console handlers.
    Auto-deletes log files older than log_retention_days.

    Args:
        log_dir: Directory to store log files
        log_retention_days: Delete logs older than this many days

    Returns:
        Configured logger instance
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    deleted = cleanup_old_logs(log_path, log_retention_days)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_path / f"edi_engine_{timestamp}.log"

    # File handler - DEBUG level
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    # Console handler - INFO level
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(message)s',
        datefmt='%H:%M:%S'
    ))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.debug(f"Log file created: {log_file} ({deleted} old log files removed)")

    return logger


def cleanup_old_logs(log_dir: Path, retention_days: int) -> int:
    """
    Delete log files older than retention_days.

    Args:
        log_dir: Path to logs directory
        retention_days: Delete files older than this many days

    Returns:
        Number of files deleted
    """
    if not log_dir.exists():
        return 0

    cutoff_time = time.time() - (retention_days * 24 * 60 * 60)
    deleted_count = 0

    for log_file in log_dir.glob("*.log"):
        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                deleted_count += 1
        except OSError as e:
            logging.getLogger(LOGGER_NAME).warning(f"Could not remove old log {log_file}: {e}")

    return deleted_count


def get_logger() -> logging.Logger:
    """Get the existing logger instance."""
    return logging.getLogger(LOGGER_NAME)
