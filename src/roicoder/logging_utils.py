"""Centralised logging utilities for the ROI color coder."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

__all__ = ["configure_logging"]

_MANAGED_HANDLER_FLAG = "_roicoder_managed_handler"
_LOG_DIR_ENV = "ROICODER_LOG_DIR"
_LOG_LEVEL_ENV = "ROICODER_LOG_LEVEL"


def _default_log_directory() -> Path:
    """Return the directory log files are written to when none is given."""

    env_override = os.environ.get(_LOG_DIR_ENV)
    if env_override:
        return Path(env_override).expanduser()

    module_path = Path(__file__).resolve()
    # Prefer the project root (folder containing pyproject.toml or .git)
    for candidate in module_path.parents:
        if (candidate / "pyproject.toml").exists() or (candidate / ".git").exists():
            return candidate / "logs"

    return Path.cwd() / "logs"


def _resolve_level(level: Optional[int]) -> int:
    """Explicit *level* first, then ``ROICODER_LOG_LEVEL`` (a name such as ``DEBUG``)."""

    if level is not None:
        return level
    name = os.environ.get(_LOG_LEVEL_ENV, "").strip().upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def _remove_managed_handlers(logger: logging.Logger) -> None:
    """Detach any handlers previously installed by :func:`configure_logging`."""

    for handler in list(logger.handlers):
        if getattr(handler, _MANAGED_HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(
    log_name: str,
    *,
    level: Optional[int] = None,
    log_dir: Optional[Path] = None,
    include_console: bool = True,
) -> Path:
    """Configure root logging to write ``<log_name>.log`` inside the log directory.

    Calling this again replaces the handlers installed by the previous call,
    so a long-lived host can switch log files between runs.
    """

    level = _resolve_level(level)
    target_directory = (
        Path(log_dir).expanduser() if log_dir else _default_log_directory()
    )
    target_directory.mkdir(parents=True, exist_ok=True)
    log_path = target_directory / f"{log_name}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _remove_managed_handlers(root_logger)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    setattr(file_handler, _MANAGED_HANDLER_FLAG, True)
    root_logger.addHandler(file_handler)

    if include_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        setattr(console_handler, _MANAGED_HANDLER_FLAG, True)
        root_logger.addHandler(console_handler)

    logging.captureWarnings(True)

    return log_path
