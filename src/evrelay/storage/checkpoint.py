from __future__ import annotations

import logging
import os
from pathlib import Path

from evrelay.core.errors import CheckpointWriteError

logger = logging.getLogger(__name__)


class CheckpointStore:
    """File-backed pointer to the next block to scan from.

    The file holds a single ASCII decimal number. Unusable content is treated
    as absent: `load` falls back to `default_block`, which may re-scan blocks
    but never skips unseen ones.
    """

    def __init__(self, path: str | Path, *, default_block: int = 0) -> None:
        """Initialize the store.

        Args:
            path: File path of the checkpoint
            default_block: Block returned when no valid checkpoint exists
        """
        self.path = Path(path)
        self.default_block = default_block
        self._last: int | None = None

    def load(self) -> int:
        """Return the persisted block, or the default block if none is usable."""
        try:
            text = self.path.read_text(encoding="ascii").strip()
        except FileNotFoundError:
            logger.warning("no checkpoint at %s, starting at block %d", self.path, self.default_block)
            return self.default_block
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("cannot read checkpoint %s (%s), using default block %d", self.path, e, self.default_block)
            return self.default_block

        if not (text.isascii() and text.isdigit()):
            logger.warning(
                "corrupted last block in %s (%r), using default block %d", self.path, text[:32], self.default_block
            )
            return self.default_block

        self._last = int(text)
        return self._last

    def save(self, block: int) -> None:
        """Atomically overwrite the checkpoint with `block`.

        Raises:
            ValueError: if `block` is negative or lower than the last saved value
            CheckpointWriteError: if the file cannot be written
        """
        if block < 0:
            raise ValueError(f"checkpoint must be non-negative, got {block}")
        if self._last is not None and block < self._last:
            raise ValueError(f"checkpoint cannot move backwards ({self._last} -> {block})")

        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write_file(tmp, f"{block}")
            os.replace(tmp, self.path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise CheckpointWriteError(f"error writing last block to {self.path}: {e}") from e
        self._last = block

    @staticmethod
    def _write_file(path: Path, text: str) -> None:
        """Write a file with immediate flush and sync."""
        with open(path, "w", encoding="ascii") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
