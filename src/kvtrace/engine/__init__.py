"""Storage engine interface and the in-memory reference engine.

Exports:
    StorageEngine, Transaction, Cursor - capability protocols
    MemoryEngine - reference engine over sorted key lists

Python 3.13+.
"""

from .memory import MemoryCursor, MemoryEngine, MemoryTransaction
from .protocol import Cursor, StorageEngine, Transaction

__all__ = [
    "Cursor",
    "MemoryCursor",
    "MemoryEngine",
    "MemoryTransaction",
    "StorageEngine",
    "Transaction",
]
