"""Storage components for scan progress.

This package provides:
- CheckpointStore: file-backed next-block pointer with atomic writes
"""

from evrelay.storage.checkpoint import CheckpointStore

__all__ = [
    "CheckpointStore",
]
