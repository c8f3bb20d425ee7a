# promptsync/core/dir_collector.py
import os
from pathlib import Path
from typing import Iterator, Set
from loguru import logger


def collect(root_path: Path) -> Iterator[Path]:
    """
    Yields the absolute path of every regular file below root_path, depth first,
    in the order the filesystem lists entries.

    Unreadable subtrees contribute nothing and their siblings are still visited.
    Directory symlinks are followed, but each resolved directory is visited once.
    """
    root = Path(root_path).absolute()
    if root.is_file():
        yield root
        return
    visited: Set[Path] = set()
    yield from _walk(root, visited)


def _walk(dir_path: Path, visited: Set[Path]) -> Iterator[Path]:
    try:
        real_dir = dir_path.resolve()
    except OSError as e:
        logger.warning(f"Could not resolve directory {dir_path}: {e}")
        return
    if real_dir in visited:
        logger.debug(f"Already visited {real_dir}, skipping (symlink loop?)")
        return
    visited.add(real_dir)

    try:
        with os.scandir(dir_path) as it:
            entries = list(it)
    except OSError as e:
        logger.warning(f"Could not list directory {dir_path}: {e}")
        return

    for entry in entries:
        entry_path = Path(entry.path)
        try:
            is_dir = entry.is_dir() # Follows symlinks
            is_file = not is_dir and entry.is_file()
        except OSError as e:
            logger.warning(f"Could not stat {entry_path}: {e}")
            continue
        if is_dir:
            yield from _walk(entry_path, visited)
        elif is_file:
            yield entry_path
        # Sockets, FIFOs, broken links: not regular files
