# promptsync/core/errors.py
from pathlib import Path


class PromptSyncError(Exception):
    """Base class for all errors raised by promptsync."""


class ReadFailure(PromptSyncError):
    """A tracked file could not be read or decoded."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path
        self.reason = reason


class WatchRegistrationFailure(PromptSyncError):
    """A directory could not be registered for change notifications."""

    def __init__(self, directory: Path, reason: str):
        super().__init__(f"Could not watch {directory}: {reason}")
        self.directory = directory
        self.reason = reason


class WatchStreamFailure(PromptSyncError):
    """The blocking wait for change notifications failed. Watching has stopped."""
