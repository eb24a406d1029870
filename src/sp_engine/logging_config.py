"""
Logging helpers for the demo runner and scripts.

Engine modules only create module loggers; handlers are attached here, on
the root logger, by whoever runs the queries.
"""

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import pandas as pd

# Global verbose flag (set by setup_logging)
VERBOSE = True

def setup_logging(name: str = None, level: str = "INFO", verbose: bool = True,
                  log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the ROOT logger with a console handler and a timestamped log file.

    Args:
        name: Log file name prefix (usually the dataset name)
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        verbose: If False, the top-k search skips per-candidate debug lines
        log_dir: Directory for log files; defaults to <cwd>/logs
    """
    global VERBOSE
    VERBOSE = verbose

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid adding handlers multiple times
    if root_logger.hasHandlers():
        return logging.getLogger(name)

    log_dir = Path(log_dir) if log_dir else Path.cwd() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    prefix = name if name else "sp_engine"
    log_file = log_dir / f"{prefix}_{time.strftime('%Y%m%d_%H%M%S')}.log"

    formatter = logging.Formatter(
        '[%(levelname)-7s] %(asctime)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    for handler in (logging.FileHandler(log_file), logging.StreamHandler()):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    return logging.getLogger(name)

def format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    return f"{int(seconds // 60)}m{int(seconds % 60)}s"

@contextmanager
def timed(logger: logging.Logger, label: str):
    """Log how long the wrapped block took."""
    start = time.time()
    yield
    logger.info(f"{label} took {format_time(time.time() - start)}")

def log_section(logger: logging.Logger, title: str, width: int = 60):
    """Log a section header with separators."""
    separator = "=" * width
    logger.info(separator)
    logger.info(title)
    logger.info(separator)

def log_dict(logger: logging.Logger, data: dict, title: str = None):
    """Log dictionary as formatted key-value pairs."""
    if title:
        logger.info(f"--- {title} ---")
    if not data:
        return
    max_key_len = max(len(str(k)) for k in data.keys())
    for key, value in data.items():
        logger.info(f"{str(key).ljust(max_key_len)} : {value}")

def log_frame(logger: logging.Logger, df: pd.DataFrame, title: str = None, max_rows: int = 20):
    """Log a result table line by line."""
    if title:
        logger.info(f"--- {title} ({len(df)} rows) ---")
    if len(df) == 0:
        logger.info("(empty)")
        return
    for line in df.head(max_rows).to_string(index=False).splitlines():
        logger.info(line)
    if len(df) > max_rows:
        logger.info(f"... {len(df) - max_rows} more rows")
