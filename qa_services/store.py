"""
Fixed-path slot storage for the uploaded document and its extracted text.

Each slot is a directory under the data root holding at most one document
and one extracted-text file. Writers replace files atomically, and every
slot has its own asyncio lock so an upload, its extraction and a question on
the same slot never interleave.
"""
import asyncio
import os
import re
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from core.errors import InputError, StorageError
from core.logging_config import get_logger

logger = get_logger(__name__)


class ExtractionStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class SlotState:
    status: ExtractionStatus = ExtractionStatus.IDLE
    characters: Optional[int] = None
    error: Optional[str] = None


def _atomic_write(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise


class DocumentStore:
    """Keyed single-slot storage; the default slot mirrors one global document."""

    def __init__(
        self,
        root: str,
        default_slot: str = "default",
        document_filename: str = "document.pdf",
        text_filename: str = "raw.txt",
    ):
        self.root = Path(root)
        self.default_slot = default_slot
        self.document_filename = document_filename
        self.text_filename = text_filename
        self._locks: Dict[str, asyncio.Lock] = {}
        self._states: Dict[str, SlotState] = {}

    def slot_key(self, slot: Optional[str] = None) -> str:
        if slot is None:
            return self.default_slot
        key = re.sub(r"[^A-Za-z0-9_-]", "", slot)
        if not key:
            raise InputError("Invalid slot name")
        return key

    def slot_dir(self, key: str) -> Path:
        return self.root / key

    def document_path(self, key: str) -> Path:
        return self.slot_dir(key) / self.document_filename

    def text_path(self, key: str) -> Path:
        return self.slot_dir(key) / self.text_filename

    def has_slot(self, key: str) -> bool:
        """True once a writer has touched the slot in this process or on disk."""
        return key in self._locks or self.slot_dir(key).is_dir()

    def lock(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    # ----- status -----

    def state(self, key: str) -> SlotState:
        state = self._states.get(key)
        if state is None:
            # Text left over from a previous run counts as a finished extraction.
            status = ExtractionStatus.COMPLETED if self.has_text(key) else ExtractionStatus.IDLE
            state = SlotState(status=status)
        return state

    def mark_pending(self, key: str) -> None:
        self._states[key] = SlotState(status=ExtractionStatus.PENDING)

    def mark_completed(self, key: str, characters: int) -> None:
        self._states[key] = SlotState(status=ExtractionStatus.COMPLETED, characters=characters)

    def mark_failed(self, key: str, error: str) -> None:
        self._states[key] = SlotState(status=ExtractionStatus.FAILED, error=error)

    # ----- files -----

    def has_document(self, key: str) -> bool:
        return self.document_path(key).is_file()

    def has_text(self, key: str) -> bool:
        return self.text_path(key).is_file()

    def write_document(self, key: str, data: bytes) -> Path:
        """Replace the slot's document and drop the text extracted from the old one."""
        path = self.document_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if path.exists():
                os.remove(path)
            self.discard_text(key)
            _atomic_write(path, data)
        except OSError as e:
            # The old files may already be gone; report what is on disk.
            self._states.pop(key, None)
            raise StorageError(str(e)) from e
        logger.info("Stored document for slot %s at %s (%d bytes)", key, path, len(data))
        return path

    def read_document(self, key: str) -> bytes:
        return self.document_path(key).read_bytes()

    def write_text(self, key: str, text: str) -> None:
        path = self.text_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write(path, text.encode("utf-8"))

    def read_text(self, key: str) -> str:
        return self.text_path(key).read_text(encoding="utf-8")

    def discard_text(self, key: str) -> None:
        path = self.text_path(key)
        if path.exists():
            os.remove(path)

    def clear(self, key: str) -> bool:
        """Delete both slot files. Returns False when the slot was already empty."""
        removed = False
        try:
            for path in (self.document_path(key), self.text_path(key)):
                if path.exists():
                    os.remove(path)
                    removed = True
        except OSError as e:
            raise StorageError(str(e)) from e
        self._states.pop(key, None)
        if removed:
            logger.info("Cleared slot %s", key)
        return removed
