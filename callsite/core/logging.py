"""
callsite Logging

Centralized logging configuration using loguru.
A run with a log directory gets its own timestamped folder.
"""

import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger


# Global exception handler to ensure all errors are logged
def _global_exception_handler(exc_type, exc_value, exc_tb):
    """Handle uncaught exceptions globally."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return

    error_msg = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    logger.error(f"Uncaught exception:\n{error_msg}")


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def _create_run_header(metadata: Dict[str, Any]) -> str:
    """Create a formatted run metadata header"""
    entries = {k: v for k, v in metadata.items() if v is not None}
    max_key_len = max(len(str(k)) for k in entries)

    content_lines = []
    for key, value in entries.items():
        key_padded = f"{key}:".ljust(max_key_len + 2)
        content_lines.append(f"  {key_padded} {value}")

    width = max(len(line) for line in content_lines) + 2
    width = max(width, 80)

    lines = []
    lines.append("┌" + "─" * width + "┐")
    lines.append("│" + " CALLSITE RUN ".center(width) + "│")
    lines.append("├" + "─" * width + "┤")
    for content in content_lines:
        lines.append("│" + content.ljust(width) + "│")
    lines.append("└" + "─" * width + "┘")
    lines.append("")

    return "\n".join(lines)


def setup_console_only(level: str = "INFO"):
    """
    Setup console-only logging.

    Args:
        level: Log level
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )


def setup_logging(
    run_name: str,
    base_dir: Path,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    metadata: Optional[Dict[str, Any]] = None,
) -> Path:
    """
    Setup console and file logging for a search run.

    Creates a log directory: {base_dir}/{run_name}_{timestamp}/

    Args:
        run_name: Name for the run (e.g. the searched symbol)
        base_dir: Base directory for logs
        console_level: Log level for console output
        file_level: Log level for file output
        metadata: Optional run metadata to include in the log header

    Returns:
        Path to the log directory
    """
    logger.remove()
    sys.excepthook = _global_exception_handler

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    safe_name = "".join(c if c.isalnum() or c in "-_" else "_" for c in run_name)
    log_dir = Path(base_dir) / f"{safe_name}_{timestamp}"
    log_dir.mkdir(parents=True, exist_ok=True)


    log_file = log_dir / "callsite.log"
    default_metadata = {
        "Run": run_name,
        "Start Time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "Log Directory": str(log_dir),
    }
    full_metadata = {**default_metadata, **(metadata or {})}
    with open(log_file, "w", encoding="utf-8") as f:
        f.write(_create_run_header(full_metadata))
        f.write("\n")

    logger.add(
        sys.stderr,
        level=console_level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    logger.add(
        log_file,
        level=file_level,
        format=FILE_FORMAT,
        rotation="50 MB",
        retention="7 days",
        encoding="utf-8",
        mode="a",
    )

    # Errors and above only
    logger.add(
        log_dir / "error.log",
        level="ERROR",
        format=FILE_FORMAT,
        rotation="10 MB",
        encoding="utf-8",
    )

    logger.info(f"Logging initialized: {log_dir}")

    return log_dir


__all__ = [
    "logger",
    "setup_logging",
    "setup_console_only",
]
