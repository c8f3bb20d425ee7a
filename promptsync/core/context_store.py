# promptsync/core/context_store.py
import threading
from pathlib import Path
from typing import List, Optional, Tuple
from loguru import logger

from .models import TrackedFile


class ContextStore:
    """
    Ordered registry of tracked files.

    Written from the UI thread (add/remove) and the watcher thread (updates),
    so every access goes through one lock. snapshot() hands out detached copies.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._files: List[TrackedFile] = []

    def add(self, file_name: str, content: str, path: Optional[Path] = None) -> TrackedFile:
        entry = TrackedFile(file_name=file_name, content=content, path=path)
        with self._lock:
            self._files.append(entry)
            count = len(self._files)
        logger.debug(f"Tracking '{file_name}' ({len(content)} chars). Total tracked: {count}")
        return entry.copy()

    def remove_at(self, index: int) -> bool:
        """Removes the entry at index. Out of range (negative included) is a no-op."""
        with self._lock:
            if index < 0 or index >= len(self._files):
                logger.debug(f"remove_at({index}) ignored, {len(self._files)} files tracked.")
                return False
            removed = self._files.pop(index)
        logger.debug(f"Stopped tracking '{removed.file_name}' (index {index}).")
        return True

    def update_by_name(self, file_name: str, new_content: str) -> bool:
        """Replaces the content of the first entry named file_name."""
        with self._lock:
            for entry in self._files:
                if entry.file_name == file_name:
                    entry.content = new_content
                    logger.debug(f"Updated content of '{file_name}' by name.")
                    return True
        return False

    def update_all_by_name(self, file_name: str, new_content: str) -> int:
        """Replaces the content of every entry named file_name. Returns the number updated."""
        updated = 0
        with self._lock:
            for entry in self._files:
                if entry.file_name == file_name:
                    entry.content = new_content
                    updated += 1
        if updated:
            logger.debug(f"Updated {updated} entr{'y' if updated == 1 else 'ies'} named '{file_name}'.")
        return updated

    def update_by_path(self, path: Path, new_content: str) -> int:
        """Replaces the content of every entry tracking path. Returns the number updated."""
        updated = 0
        with self._lock:
            for entry in self._files:
                if entry.path is not None and entry.path == path:
                    entry.content = new_content
                    updated += 1
        if updated:
            logger.debug(f"Updated {updated} entr{'y' if updated == 1 else 'ies'} for {path}.")
        return updated

    def contains_path(self, path: Path) -> bool:
        with self._lock:
            return any(entry.path == path for entry in self._files)

    def names_matching(self, file_name: str) -> int:
        with self._lock:
            return sum(1 for entry in self._files if entry.file_name == file_name)

    def snapshot(self) -> Tuple[TrackedFile, ...]:
        """Current entries in order, as copies safe to use after further mutations."""
        with self._lock:
            return tuple(entry.copy() for entry in self._files)

    def clear(self) -> None:
        with self._lock:
            self._files.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)
