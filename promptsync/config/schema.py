# promptsync/config/schema.py
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from ..core.models import MatchMode, TaskType


class AppConfig(BaseModel):
    default_task_type: TaskType = TaskType.FEATURE
    last_instruction: str = "" # Instruction text only, file contents are never saved
    match_mode: MatchMode = MatchMode.PATH # "name" restores same-name cross updates
    read_encodings: List[str] = Field(default_factory=lambda: ["utf-8"])
    log_level: str = "INFO"
    render_debounce_ms: int = Field(default=150, ge=0)
    window_geometry: Optional[bytes] = None # QMainWindow.saveGeometry() as hex bytes

    @field_validator("default_task_type", mode="before")
    @classmethod
    def _fallback_task_type(cls, value):
        return TaskType.parse(value)

    @field_validator("read_encodings")
    @classmethod
    def _require_encoding(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("read_encodings must name at least one encoding")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()
