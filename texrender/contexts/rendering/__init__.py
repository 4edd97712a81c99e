"""
Rendering Context

Responsibilities:
- Runs the typesetting executable once per pass in a private working directory
- Decides from the log whether another pass is needed
- Turns failed passes into errors built from the log
- Hands the PDF to the caller, in memory or at a destination path

Owns: pass loop, log interpretation, working directory lifetime
Never: Parses or modifies document content
"""

from texrender.contexts.rendering.compiler import (
    JOBNAME,
    RenderResult,
    render,
    render_document,
    render_to_file,
)
from texrender.contexts.rendering.exceptions import (
    ArtifactRetrievalError,
    CompilationError,
    EnvironmentFailureError,
    InvalidOptionsError,
    LaunchError,
    RenderError,
    RenderTimeoutError,
    UnexpectedLogStateError,
)
from texrender.contexts.rendering.options import (
    MAX_AUTO_PASSES,
    NOP_LOGGER,
    RenderOptions,
    load_options,
)

__all__ = [
    "JOBNAME",
    "MAX_AUTO_PASSES",
    "NOP_LOGGER",
    "ArtifactRetrievalError",
    "CompilationError",
    "EnvironmentFailureError",
    "InvalidOptionsError",
    "LaunchError",
    "RenderError",
    "RenderOptions",
    "RenderResult",
    "RenderTimeoutError",
    "UnexpectedLogStateError",
    "load_options",
    "render",
    "render_document",
    "render_to_file",
]
