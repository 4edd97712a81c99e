"""Custom exceptions for rendering context with phase and working directory references."""

from pathlib import Path
from typing import List, Optional


class RenderError(Exception):
    """
    Base exception for render failures.

    Attributes:
        message: Error description
        phase: Render phase that failed (e.g., 'creating working directory', 'rendering')
        workdir: Working directory retained for inspection (None if it was removed)
    """

    def __init__(
        self,
        message: str,
        phase: Optional[str] = None,
        workdir: Optional[Path] = None,
    ):
        self.message = message
        self.phase = phase
        self.workdir = workdir
        super().__init__(self._format())

    def _format(self) -> str:
        text = f"{self.phase}: {self.message}" if self.phase else self.message
        if self.workdir is not None:
            text += f"\nWorking directory retained for inspection: {self.workdir}"
        return text

    def retained_at(self, workdir: Path) -> "RenderError":
        """Record the retained working directory and rebuild the message."""
        self.workdir = workdir
        self.args = (self._format(),)
        return self

    def in_phase(self, phase: str) -> "RenderError":
        """Attach the render phase unless one was already set."""
        if self.phase is None:
            self.phase = phase
            self.args = (self._format(),)
        return self


class EnvironmentFailureError(RenderError):
    """Raised when the working directory cannot be created or the artifact cannot be moved."""


class LaunchError(RenderError):
    """Raised when the typesetting executable cannot be started."""


class CompilationError(RenderError):
    """
    Exception raised when the typesetting executable exits with a nonzero status.

    Attributes:
        errors: Error lines taken from the log, in the order encountered
        returncode: Exit status of the failed pass
        log_path: Log file the errors were read from
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        log_path: Optional[Path] = None,
        phase: Optional[str] = None,
        workdir: Optional[Path] = None,
    ):
        self.errors = list(errors or [])
        self.returncode = returncode
        self.log_path = log_path
        super().__init__(message, phase=phase, workdir=workdir)


class UnexpectedLogStateError(RenderError):
    """
    Exception raised when a pass failed but its log explains nothing.

    Signals that the log no longer looks the way this package expects
    (missing file, or no error marker lines), which should be investigated.
    """

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        log_path: Optional[Path] = None,
        phase: Optional[str] = None,
        workdir: Optional[Path] = None,
    ):
        self.returncode = returncode
        self.log_path = log_path
        super().__init__(message, phase=phase, workdir=workdir)


class ArtifactRetrievalError(RenderError):
    """Raised when a render reported success but the PDF is missing or unreadable."""


class RenderTimeoutError(RenderError):
    """
    Exception raised when a pass exceeds its deadline.

    The child process is terminated before this is raised.

    Attributes:
        timeout: Deadline in seconds that was exceeded
    """

    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        phase: Optional[str] = None,
        workdir: Optional[Path] = None,
    ):
        self.timeout = timeout
        super().__init__(message, phase=phase, workdir=workdir)


class InvalidOptionsError(RenderError, ValueError):
    """Exception raised when render options fail validation."""
