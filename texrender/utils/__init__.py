"""
Shared utilities for texrender.

Common functionality used across contexts:
- Logger configuration
- Timestamps for log directories
- PDF inspection
"""

from texrender.utils.pdf_processing import page_count
from texrender.utils.timestamp import now

__all__ = ["now", "page_count"]
