"""PDF inspection helpers for rendered output."""

import io
from pathlib import Path
from typing import Optional, Union

from PyPDF2 import PdfReader


def page_count(pdf: Union[bytes, Path]) -> Optional[int]:
    """Get page count from a PDF file or in-memory PDF, or None if unreadable."""
    try:
        if isinstance(pdf, (bytes, bytearray)):
            reader = PdfReader(io.BytesIO(pdf))
        else:
            reader = PdfReader(str(pdf))
        return len(reader.pages)
    except Exception:
        return None
