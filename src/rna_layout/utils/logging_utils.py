import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Optional
from datetime import datetime

# Default log directory
DEFAULT_LOG_DIR = Path("var/log")

logger = logging.getLogger(__name__)

# Library modules only ever call `getLogger`; handlers hang off the package root.
PACKAGE_LOGGERS = ("rna_layout",)

_VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


def get_log_file_path(
        module_name: str,
        log_dir: Optional[Path] = None,
        include_timestamp: bool = True
) -> Path:
    """
    Builds a log file path for a logger name, creating the directory if needed.

    Parameters
    ----------
    module_name : str
        Logger name, e.g. "rna_layout.layout". Dots become underscores.
    log_dir : Optional[Path], optional
        Target directory. Defaults to `DEFAULT_LOG_DIR`.
    include_timestamp : bool, optional
        Append `_YYYYmmdd_HHMMSS` so runs do not overwrite each other.

    Returns
    -------
    Path
        The log file path.
    """
    log_dir = DEFAULT_LOG_DIR if log_dir is None else log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    safe_name = module_name.replace(".", "_")
    if include_timestamp:
        safe_name = f"{safe_name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

    return log_dir / f"{safe_name}.log"


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
    console_level: Optional[int] = None,
    file_level: Optional[int] = None,
) -> logging.Logger:
    """
    Configures a logger with a stdout handler and an optional file handler.

    Existing handlers are cleared first so repeated calls do not duplicate
    output.

    Parameters
    ----------
    name : str
        Logger name.
    level : int, optional
        Base level for the logger and its handlers, by default `logging.INFO`.
    log_file : Optional[str], optional
        Explicit log file path. Takes precedence over `enable_file_logging`.
    log_dir : Optional[Path], optional
        Directory for the generated log file when `log_file` is not given.
    enable_file_logging : bool, optional
        Write a timestamped file under `log_dir` when `log_file` is not given.
    console_level, file_level : Optional[int], optional
        Per-handler overrides of `level`.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                                  datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(console_level if console_level is not None else level)
    logger.addHandler(console_handler)

    file_handler = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='a')
    elif enable_file_logging:
        log_path = get_log_file_path(name, log_dir=log_dir, include_timestamp=True)
        file_handler = logging.FileHandler(log_path, mode='a')
        logger.info(f"Logging to file: {log_path}")

    if file_handler:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(file_level if file_level is not None else level)
        logger.addHandler(file_handler)

    return logger


def verbosity_to_level(verbose_level: int) -> int:
    """Maps a `-v` count to a logging level (0 WARNING, 1 INFO, 2+ DEBUG)."""
    return _VERBOSITY_LEVELS.get(min(max(verbose_level, 0), 2), logging.INFO)


def configure_package_logging(
    verbose_level: int,
    log_file: Optional[str] = None,
    logger_names: Iterable[str] = PACKAGE_LOGGERS,
) -> int:
    """
    Configures the package loggers from a CLI verbosity count.

    A log file is written when `verbose_level > 0` or `log_file` is given.

    Returns
    -------
    int
        The logging level that was applied.
    """
    level = verbosity_to_level(verbose_level)
    should_log_to_file = verbose_level > 0 or log_file is not None
    for logger_name in logger_names:
        setup_logger(
            logger_name,
            level=level,
            log_file=log_file,
            enable_file_logging=should_log_to_file,
        )
    return level


def set_log_level(logger: logging.Logger, level: int) -> None:
    """Updates a logger and all its handlers to `level`."""
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def cleanup_old_logs(log_dir: Optional[Path] = None, days_to_keep: int = 7) -> List[Path]:
    """
    Remove `.log` files older than `days_to_keep` days.

    Parameters
    ----------
    log_dir : Path, optional
        Log directory to clean (defaults to `DEFAULT_LOG_DIR`).
    days_to_keep : int
        Keep logs modified within the last N days.

    Returns
    -------
    List[Path]
        The files that were removed.
    """
    log_dir = DEFAULT_LOG_DIR if log_dir is None else log_dir
    if not log_dir.exists():
        return []

    cutoff_time = time.time() - days_to_keep * 86400
    removed: List[Path] = []
    for log_file in sorted(log_dir.glob("*.log")):
        if log_file.stat().st_mtime < cutoff_time:
            log_file.unlink()
            removed.append(log_file)
            logger.debug(f"Removed old log: {log_file}")
    return removed
