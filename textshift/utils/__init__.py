"""Utility modules for textshift.

This package contains:
- Logging configuration
- Content digests and batch deduplication
- Retrying HTTP helpers for provider clients
"""

from .hashing import content_hash, dedupe, expand
from .logging import setup_logging

__all__ = [
    "content_hash",
    "dedupe",
    "expand",
    "setup_logging",
]
