# promptsync/core/session.py
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from loguru import logger

from ..config.schema import AppConfig
from .context_store import ContextStore
from .dir_collector import collect
from .errors import ReadFailure
from .file_reader import read_text
from .models import TaskType, TrackedFile
from .prompt_renderer import render
from .watcher import FileWatcher, watch_key

PathLike = Union[str, Path]


class PromptSession:
    """
    Wires the store, the watcher and the renderer together.

    The presentation layer feeds drops and removals in and calls render();
    on_change fires on the watcher thread after files are reloaded from disk,
    on_failure if watching stops for good.
    """

    def __init__(self,
                 config: Optional[AppConfig] = None,
                 on_change: Optional[Callable[[], None]] = None,
                 reader: Optional[Callable[[Path], str]] = None,
                 watch: bool = True,
                 on_failure: Optional[Callable[[], None]] = None):
        self.config = config or AppConfig()
        self.task_type: TaskType = self.config.default_task_type
        self.instruction: str = ""
        self.reader = reader or partial(read_text, encodings=tuple(self.config.read_encodings))
        self.watch = watch
        self.store = ContextStore()
        self.watcher = FileWatcher(
            self.store,
            on_change=on_change,
            match_mode=self.config.match_mode,
            reader=self.reader,
            on_failure=on_failure,
        )

    # --- Lifecycle ---

    def start(self) -> None:
        if self.watch:
            self.watcher.start()

    def stop(self) -> None:
        self.watcher.stop()

    def __enter__(self) -> "PromptSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # --- User actions ---

    def set_task_type(self, value) -> TaskType:
        self.task_type = TaskType.parse(value)
        if self.task_type != value:
            logger.debug(f"Unknown task type {value!r}, using {self.task_type.value}.")
        return self.task_type

    def add_file(self, file_path: PathLike) -> Optional[TrackedFile]:
        """Reads and tracks one file. Unreadable files are logged and not added."""
        key = watch_key(Path(file_path))
        try:
            content = self.reader(key)
        except ReadFailure as e:
            logger.error(f"Not adding file: {e}")
            return None
        entry = self.store.add(key.name, content, path=key)
        if self.watch:
            self.watcher.subscribe(key)
        return entry

    def drop(self, paths: Iterable[PathLike]) -> List[TrackedFile]:
        """Tracks dropped files; directories are expanded recursively."""
        added: List[TrackedFile] = []
        for root in paths:
            root_path = Path(root)
            if not root_path.exists():
                logger.warning(f"Dropped path does not exist: {root_path}")
                continue
            for file_path in collect(root_path):
                entry = self.add_file(file_path)
                if entry is not None:
                    added.append(entry)
        logger.info(f"Added {len(added)} file(s). Tracking {len(self.store)} in total.")
        return added

    def remove_at(self, index: int) -> bool:
        return self.store.remove_at(index)

    def clear(self) -> None:
        self.store.clear()

    def files(self):
        return self.store.snapshot()

    def render(self) -> str:
        return render(self.task_type, self.instruction, self.store.snapshot())
