"""
texrender - repeatable TeX-to-PDF rendering around an external typesetting executable

Pipes a document to pdflatex (or any compatible engine) over stdin, reruns it
until cross-references settle, and returns the PDF or an error built from the
engine's log.

Architecture:
- Rendering Context: pass loop, log interpretation, process invocation
- Utils: logger setup, timestamps, PDF inspection
"""

from texrender.contexts.rendering import (
    RenderOptions,
    RenderResult,
    load_options,
    render,
    render_document,
    render_to_file,
)

__version__ = "0.1.0"

__all__ = [
    "RenderOptions",
    "RenderResult",
    "load_options",
    "render",
    "render_document",
    "render_to_file",
]
