"""
Loguru sinks for EvoDevo runs: console plus one rotating file per run.
"""

from datetime import datetime, timezone
import os
import sys

from loguru import logger

_PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
_COLOR_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<blue>{function}</blue>:<yellow>{line}</yellow> | "
    "<level>{message}</level>"
)


def setup_logger(
    run_name: str = "evodevo",
    log_dir: str = "logs",
    level: str = "INFO",
    rotation: str = "50 MB",
    retention: str = "30 days",
    enable_colors: bool = True,
) -> str:
    """
    Replace loguru's default sink with a console sink and a file sink.

    The file is ``<log_dir>/<run_name>_<UTC timestamp>.log``, so runs with
    different names never share a log.

    Args:
        run_name: Experiment name, used as the log file prefix
        log_dir: Directory for log files
        level: Logging level for both sinks
        rotation: Log rotation policy (e.g., "50 MB", "1 day")
        retention: Log retention policy (e.g., "30 days")
        enable_colors: Colorize the console when it is a TTY

    Returns:
        Path to the log file
    """
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"{run_name}_{timestamp}.log")

    colorize = enable_colors and sys.stdout.isatty()

    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        format=_COLOR_FORMAT if colorize else _PLAIN_FORMAT,
        colorize=colorize,
        backtrace=True,
        diagnose=False,
    )
    logger.add(
        log_file,
        level=level,
        format=_PLAIN_FORMAT,
        rotation=rotation,
        retention=retention,
        compression="zip",
        encoding="utf-8",
        backtrace=True,
        diagnose=False,
    )

    logger.info("[Logging] Run '{}' logging to console and {}", run_name, log_file)
    return log_file
