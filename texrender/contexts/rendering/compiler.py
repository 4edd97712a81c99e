"""
Document Rendering Module

Renders a TeX document to PDF by piping it to the typesetting executable,
repeating the run until the log stops asking for another pass.

Each render gets its own freshly created working directory, removed when the
render ends. Concurrent renders share nothing but the filesystem.
"""

import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional, Union

from texrender.contexts.rendering.exceptions import (
    ArtifactRetrievalError,
    EnvironmentFailureError,
    RenderError,
)
from texrender.contexts.rendering.log_interpreter import (
    collect_warnings,
    diagnose,
    log_path,
    needs_rerun,
    read_log,
)
from texrender.contexts.rendering.logger import (
    _log_debug,
    log_pass_result,
    log_render_failure,
    log_render_result,
    log_render_start,
)
from texrender.contexts.rendering.options import RenderOptions
from texrender.contexts.rendering.process import run_pass

JOBNAME = "texrender"

Document = Union[bytes, bytearray, str, IO]


@dataclass
class RenderResult:
    """
    Result of a successful render.

    Attributes:
        passes: Number of times the executable ran
        warnings: Warnings found in the final pass's log
        pdf: Rendered PDF (None when it was moved to a destination)
        pdf_path: Where the PDF was moved (None when returned in memory)
        elapsed_s: Wall-clock time for the whole render
    """

    passes: int
    warnings: List[str] = field(default_factory=list)
    pdf: Optional[bytes] = None
    pdf_path: Optional[Path] = None
    elapsed_s: float = 0.0


def _read_document(document: Document) -> bytes:
    """Read the whole document so every pass gets identical input."""
    if isinstance(document, (bytes, bytearray, memoryview)):
        return bytes(document)
    if isinstance(document, str):
        return document.encode("utf-8")
    if hasattr(document, "read"):
        data = document.read()
        return data.encode("utf-8") if isinstance(data, str) else bytes(data)
    raise TypeError(f"document must be bytes, str or a readable file object, got: {type(document).__name__}")


def _run_passes(source: bytes, workdir: Path, options: RenderOptions) -> RenderResult:
    """
    Run the executable until the document is finished or the pass budget is spent.

    Rerun detection is only consulted in automatic mode.
    """
    passes = 0
    rerun = True
    while rerun and passes < options.max_passes:
        passes += 1
        pass_start = time.time()

        try:
            outcome = run_pass(source, workdir, options, JOBNAME)
        except RenderError as e:
            raise e.in_phase("rendering")

        log_pass_result(passes, options.max_passes, outcome.returncode, time.time() - pass_start)

        if not outcome.succeeded:
            # The exit status says nothing useful; the log says why
            raise diagnose(workdir, JOBNAME, outcome.returncode).in_phase("rendering")

        if options.automatic:
            rerun = needs_rerun(workdir, JOBNAME)
            if rerun and passes < options.max_passes:
                _log_debug("Log requests another pass")

    if options.automatic and rerun:
        _log_debug(f"Stopped after {passes} passes although the log still requests a rerun")

    try:
        warnings = collect_warnings(read_log(log_path(workdir, JOBNAME)))
    except OSError:
        warnings = []

    return RenderResult(passes=passes, warnings=warnings)


def _artifact_path(workdir: Path) -> Path:
    return workdir / f"{JOBNAME}.pdf"


def _read_artifact(workdir: Path) -> bytes:
    """Slurp the generated PDF."""
    pdf_path = _artifact_path(workdir)
    try:
        return pdf_path.read_bytes()
    except OSError as e:
        raise ArtifactRetrievalError(
            f"Generated PDF could not be read ({pdf_path}: {e.strerror or e})",
            phase="reading artifact",
        ) from e


def _move_artifact(workdir: Path, destination: Path) -> Path:
    """Move the generated PDF to the caller's destination and return its final path."""
    pdf_path = _artifact_path(workdir)
    if not pdf_path.is_file():
        raise ArtifactRetrievalError(
            f"Generated PDF not found: {pdf_path}", phase="moving artifact"
        )
    try:
        return Path(shutil.move(str(pdf_path), str(destination)))
    except OSError as e:
        raise EnvironmentFailureError(
            f"Could not move generated PDF to {destination}: {e.strerror or e}",
            phase="moving artifact",
        ) from e


def render_document(
    document: Document,
    options: Optional[RenderOptions] = None,
    destination: Optional[Union[str, Path]] = None,
) -> RenderResult:
    """
    Render a document to PDF.

    Creates a fresh working directory, runs the typesetting executable with the
    document on stdin until the document is finished, then either reads the PDF
    into memory or moves it to destination.

    The working directory is always removed, except when a RenderError ends the
    render and options.keep_on_failure is set; the error then names the directory.
    Any other exception (e.g. from options.logger) propagates unchanged and the
    directory is removed.

    Args:
        document: TeX source as bytes, str (encoded UTF-8) or a readable file object
        options: Render options (default: RenderOptions())
        destination: Where to move the PDF (default: None, return it in memory)

    Returns:
        RenderResult with pdf set (in memory) or pdf_path set (moved)

    Raises:
        InvalidOptionsError: If options fail validation
        EnvironmentFailureError: If the working directory cannot be created or the PDF cannot be moved
        LaunchError: If the executable cannot be started
        CompilationError: If a pass exits nonzero; the message holds the log's error lines
        UnexpectedLogStateError: If a pass fails but its log names no error
        RenderTimeoutError: If a pass exceeds options.timeout
        ArtifactRetrievalError: If the executable succeeded but the PDF is missing or unreadable
    """
    options = (options or RenderOptions()).validate()
    source = _read_document(document)
    start_time = time.time()

    try:
        workdir = Path(tempfile.mkdtemp(prefix=f"{JOBNAME}-"))
    except OSError as e:
        raise EnvironmentFailureError(
            f"Could not create temporary directory: {e.strerror or e}",
            phase="creating working directory",
        ) from e

    log_render_start(options.command, workdir, options.max_passes, options.automatic)

    retained = False
    try:
        result = _run_passes(source, workdir, options)
        if destination is None:
            result.pdf = _read_artifact(workdir)
        else:
            result.pdf_path = _move_artifact(workdir, Path(destination))
    except RenderError as e:
        if options.keep_on_failure:
            e.retained_at(workdir)
            retained = True
        log_render_failure(e, time.time() - start_time)
        raise
    finally:
        # Only a RenderError can tell the caller where a kept directory is
        if not retained:
            shutil.rmtree(workdir, ignore_errors=True)

    result.elapsed_s = time.time() - start_time
    log_render_result(result)
    return result


def render(document: Document, options: Optional[RenderOptions] = None) -> bytes:
    """
    Render a document and return the PDF.

    Example:
        >>> document = r'''
        ... \\documentclass[12pt]{article}
        ... \\begin{document}
        ... This is a LaTeX document.
        ... \\end{document}
        ... '''
        >>> pdf = render(document, RenderOptions(command="/usr/bin/pdflatex", runs=1))
    """
    return render_document(document, options).pdf


def render_to_file(
    document: Document,
    destination: Union[str, Path],
    options: Optional[RenderOptions] = None,
) -> Path:
    """Render a document and move the PDF to destination. Returns the PDF's path."""
    return render_document(document, options, destination=destination).pdf_path
