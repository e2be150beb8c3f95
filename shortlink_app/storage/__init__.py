"""
In-memory storage for short URLs and their click history.

Both components are plain objects handed to services through FastAPI
dependencies, so every test can build its own isolated instances.
"""

from .ledger import ClickLedger
from .registry import CodeRegistry

__all__ = [
    "ClickLedger",
    "CodeRegistry",
]
