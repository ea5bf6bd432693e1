"""
Logging setup
Every store mutation and external data failure ends up here
"""
import logging
import sys
from datetime import datetime
from pathlib import Path


def setup_logging(log_level: str = "INFO", log_to_file: bool = True):
    """
    Configure the logging system

    Args:
        log_level: log level (DEBUG, INFO, WARNING, ERROR)
        log_to_file: also write daily log files under logs/
    """
    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    formatter = logging.Formatter(log_format, datefmt=date_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Drop whatever handlers a previous call installed
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)

    log_dir = Path("logs")
    if log_to_file:
        log_dir.mkdir(exist_ok=True)
        today = datetime.now().strftime("%Y-%m-%d")

        # Main log file (everything)
        main_log_file = log_dir / f"app_{today}.log"
        file_handler = logging.FileHandler(main_log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

        # Watchlist log file (store mutations)
        watchlist_logger = logging.getLogger("sharesathi.services.watchlist_service")
        watchlist_logger.handlers.clear()
        watchlist_log_file = log_dir / f"watchlist_{today}.log"
        watchlist_handler = logging.FileHandler(watchlist_log_file, encoding="utf-8")
        watchlist_handler.setFormatter(formatter)
        watchlist_handler.setLevel(logging.INFO)
        watchlist_logger.addHandler(watchlist_handler)

    # Third-party log levels
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("yfinance").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    root_logger.info("Logging initialised")
    if log_to_file:
        root_logger.info(f"Log directory: {log_dir.absolute()}")


def get_logger(name: str) -> logging.Logger:
    """Return a named logger"""
    return logging.getLogger(name)
