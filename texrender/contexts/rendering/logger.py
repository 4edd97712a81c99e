"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from texrender.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(
    log_dir: Optional[Path] = None, command: str = "", verbose: bool = False
) -> Optional[Path]:
    """
    Setup logger for rendering context.

    Only entry points (the CLI) should call this; library calls log through
    whatever sinks the host program configured.

    Args:
        log_dir: Directory for this rendering session (None = console only)
        command: Typesetting executable, recorded in the provenance header
        verbose: Show DEBUG messages on the console

    Returns:
        Path to log file, or None
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"Typesetting executable": command},
        console_level="DEBUG" if verbose else "INFO",
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(command: str, workdir: Path, max_passes: int, automatic: bool) -> None:
    """Log start of a render with context."""
    mode = "automatic" if automatic else "fixed"
    _log_info(f"Rendering with {command} ({mode}, up to {max_passes} passes)")
    _log_debug(f"  Working directory: {workdir}")


def log_pass_result(pass_number: int, max_passes: int, returncode: int, elapsed_time: float) -> None:
    """Log the outcome of a single pass."""
    _log_debug(
        f"Pass {pass_number}/{max_passes} exited with {returncode} ({elapsed_time:.2f}s)"
    )


def log_render_result(result) -> None:  # result: RenderResult
    """
    Log a successful render with its warnings.

    Args:
        result: RenderResult from render_document()
    """
    _log_success(
        f"Render succeeded after {result.passes} pass(es): "
        f"{len(result.warnings)} warnings ({result.elapsed_s:.2f}s)"
    )
    if result.pdf_path:
        _log_debug(f"  PDF: {result.pdf_path}")

    # Warnings are logged at debug level (can be verbose)
    if result.warnings:
        warning_limit = 10
        for i, warn in enumerate(result.warnings[:warning_limit], 1):
            _log_debug(f"  Warning {i}: {warn}")
        if len(result.warnings) > warning_limit:
            _log_debug(f"  ... and {len(result.warnings) - warning_limit} more warnings")


def log_render_failure(error: Exception, elapsed_time: float) -> None:
    """Log a failed render."""
    _log_error(f"Render failed ({elapsed_time:.2f}s)")
    for line in str(error).splitlines():
        _log_error(f"  {line}")
