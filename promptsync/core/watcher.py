# promptsync/core/watcher.py
import os
import queue
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .context_store import ContextStore
from .errors import ReadFailure, WatchRegistrationFailure, WatchStreamFailure
from .file_reader import read_text
from .models import MatchMode

_STOP = object() # Sentinel that ends the worker loop


def watch_key(file_path: Path) -> Path:
    """
    Canonical form of a tracked path: resolved parent directory plus the base name.
    Change events for a file in a watched directory arrive in exactly this form.
    """
    path = Path(file_path).absolute()
    return path.parent.resolve() / path.name


class _ModifiedEventHandler(FileSystemEventHandler):
    """Runs on the watchdog observer thread; only hands modified file paths to the worker."""

    def __init__(self, events: "queue.Queue"):
        super().__init__()
        self._events = events

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._events.put(Path(os.fsdecode(event.src_path)))


class FileWatcher:
    """
    Keeps a ContextStore in sync with disk.

    Parent directories of tracked files are watched with a watchdog Observer.
    A single worker thread blocks on the event queue, rereads changed files,
    updates the store and then calls on_change once per batch. on_failure is
    called once if the event stream dies. Both run on the worker thread;
    callers that touch UI must hop to their own thread.
    """

    def __init__(self,
                 store: ContextStore,
                 on_change: Optional[Callable[[], None]] = None,
                 match_mode: MatchMode = MatchMode.PATH,
                 reader: Callable[[Path], str] = read_text,
                 on_failure: Optional[Callable[[], None]] = None):
        self.store = store
        self.on_change = on_change
        self.on_failure = on_failure
        self.match_mode = MatchMode(match_mode)
        self.reader = reader
        self._events: "queue.Queue" = queue.Queue()
        self._handler = _ModifiedEventHandler(self._events)
        self._observer: Optional[Observer] = None
        self._worker: Optional[threading.Thread] = None
        self._watched: Set[Path] = set()
        self._lock = threading.Lock()
        self._failure: Optional[WatchStreamFailure] = None
        self._stopped = False

    # --- Lifecycle ---

    def start(self) -> None:
        """Starts the observer and the worker thread. Calling it again does nothing."""
        with self._lock:
            if self._worker is not None:
                return
            if self._stopped:
                logger.warning("File watcher was stopped and cannot be restarted.")
                return
            self._observer = Observer()
            self._observer.start()
            self._worker = threading.Thread(target=self._run, name="promptsync-watcher", daemon=True)
            self._worker.start()
        logger.info("File watcher started.")

    def stop(self, timeout: float = 2.0) -> None:
        """Stops the observer and the worker. Safe to call more than once."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            observer, worker = self._observer, self._worker
        if worker is None:
            return
        self._events.put(_STOP)
        if observer is not None:
            try:
                observer.stop()
                observer.join(timeout)
            except Exception as e:
                logger.error(f"Error stopping filesystem observer: {e}")
        worker.join(timeout)
        logger.info("File watcher stopped.")

    @property
    def is_running(self) -> bool:
        return (self._worker is not None and self._worker.is_alive()
                and self._observer is not None and self._observer.is_alive())

    @property
    def failed(self) -> bool:
        """
        True once the event stream has failed, either the worker's wait or the
        watchdog observer thread. Watching does not resume after that.
        """
        if self._failure is not None:
            return True
        observer = self._observer
        return observer is not None and not self._stopped and not observer.is_alive()

    @property
    def failure(self) -> Optional[WatchStreamFailure]:
        return self._failure

    @property
    def watched_directories(self) -> Set[Path]:
        with self._lock:
            return set(self._watched)

    # --- Registration ---

    def subscribe(self, file_path: Path) -> bool:
        """
        Watches the directory containing file_path. Each directory is registered once.
        Returns False if the directory could not be registered; the file stays tracked.
        """
        directory = watch_key(file_path).parent
        with self._lock:
            if directory in self._watched:
                return True
        self.start()
        try:
            self._register(directory)
        except WatchRegistrationFailure as e:
            logger.error(f"{e}. Live updates disabled for files in this directory.")
            return False
        with self._lock:
            self._watched.add(directory)
        logger.debug(f"Watching directory: {directory}")
        return True

    def _register(self, directory: Path) -> None:
        if self._observer is None or self._stopped:
            raise WatchRegistrationFailure(directory, "watcher is not running")
        try:
            self._observer.schedule(self._handler, str(directory), recursive=False)
        except OSError as e:
            raise WatchRegistrationFailure(directory, str(e)) from e
        except Exception as e:
            logger.exception(f"Unexpected error registering watch on {directory}")
            raise WatchRegistrationFailure(directory, str(e)) from e

    # --- Worker ---

    def _run(self) -> None:
        logger.debug("Watch loop running.")
        try:
            while True:
                item = self._next_event()
                if item is _STOP:
                    break
                batch: List[Path] = [item]
                stop_requested = False
                while True:
                    try:
                        item = self._events.get_nowait()
                    except queue.Empty:
                        break
                    if item is _STOP:
                        stop_requested = True
                        break
                    batch.append(item)
                self._process_batch(batch)
                if stop_requested:
                    break
        except Exception as e:
            self._failure = WatchStreamFailure(f"watch loop terminated: {e}")
            logger.exception(f"{self._failure}. Live updates stopped for all tracked files.")
            if self.on_failure is not None:
                try:
                    self.on_failure()
                except Exception as cb_err:
                    logger.exception(f"Error in failure callback: {cb_err}")
            return
        logger.debug("Watch loop exited.")

    def _next_event(self):
        return self._events.get() # Blocks until the next notification

    def _process_batch(self, batch: List[Path]) -> int:
        """Applies one batch of modified paths. Returns how many were applied."""
        unique: Dict[Path, None] = dict.fromkeys(batch) # Editors often fire several events per save
        applied = 0
        for changed in unique:
            try:
                if self._apply_change(changed):
                    applied += 1
            except ReadFailure as e:
                logger.error(f"Skipping update: {e}")
            except Exception as e:
                logger.exception(f"Unexpected error handling change to {changed}: {e}")
        if applied and self.on_change is not None:
            try:
                self.on_change()
            except Exception as e:
                logger.exception(f"Error in change callback: {e}")
        return applied

    def _apply_change(self, changed: Path) -> bool:
        if self.match_mode is MatchMode.NAME:
            name = changed.name
            if not self.store.names_matching(name):
                return False
            content = self.reader(changed)
            # Every same-named entry takes the new content, wherever it came from
            updated = self.store.update_all_by_name(name, content) > 0
        else:
            key = watch_key(changed)
            if not self.store.contains_path(key):
                return False
            content = self.reader(changed)
            updated = self.store.update_by_path(key, content) > 0
        if updated:
            logger.info(f"Reloaded changed file: {changed.name}")
        return updated
