# promptsync/core/models.py
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional


class TaskType(str, Enum):
    """Task categories offered by the task selector."""
    FEATURE = "Feature"
    FIX = "Fix"
    REFACTOR = "Refactor"
    QUESTION = "Question"
    BLOG = "Blog"
    OTHERS = "Others"

    @classmethod
    def parse(cls, value) -> "TaskType":
        """Maps any value to a task type. Unknown values become FEATURE."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value:
                return member
        return cls.FEATURE


class MatchMode(str, Enum):
    """How change notifications are matched to tracked files."""
    PATH = "path" # Resolved absolute path
    NAME = "name" # Base name only, same-named files cross-update


@dataclass
class TrackedFile:
    """A file currently contributing its content to the prompt."""
    file_name: str
    content: str
    path: Optional[Path] = None # Resolved path, None for entries added by name only

    def copy(self) -> "TrackedFile":
        return replace(self)
