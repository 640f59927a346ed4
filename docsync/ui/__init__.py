"""
Terminal UI for Document Sync.
"""

from . import display
from .colors import Colors
from .display import SyncEventPrinter

__all__ = [
    "display",
    "Colors",
    "SyncEventPrinter",
]
