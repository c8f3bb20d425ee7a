# promptsync/core/prompt_renderer.py
from typing import Dict, Iterable, Tuple, Union

from .models import TaskType, TrackedFile

PREAMBLES: Dict[TaskType, str] = {
    TaskType.FEATURE: "You are tasked to implement a feature. Instructions are as follows:\n\n",
    TaskType.FIX: "You are tasked to fix a bug. Instructions are as follows:\n\n",
    TaskType.REFACTOR: "You are tasked to do a code refactoring. Instructions are as follows:\n\n",
    TaskType.QUESTION: "You are tasked to answer a question:\n\n",
    TaskType.BLOG: "You are tasked to write a blog post. Instructions are as follows:\n\n",
    TaskType.OTHERS: "\n\n",
}

OUTPUT_FORMAT_DIRECTIVES: Tuple[str, ...] = (
    "- Output code without descriptions, unless it is important.",
    "- Minimize prose, comments and empty lines.",
    "- Only show the relevant code that needs to be modified. Use comments to represent the parts that are not modified.",
    "- Make it easy to copy and paste.",
    "- Consider other possibilities to achieve the result, do not be limited by the prompt.",
)

OUTPUT_FORMAT_BLOCK = (
    "Instructions for the output format:\n"
    + "".join(f"{line}\n" for line in OUTPUT_FORMAT_DIRECTIVES)
    + "\n"
)

CONTEXT_HEADER = "Code Context:\n"

FileEntry = Union[TrackedFile, Tuple[str, str]]


def preamble_for(task_type) -> str:
    """Preamble text for a task type. Unknown task types get the Feature preamble."""
    return PREAMBLES[TaskType.parse(task_type)]


def _name_and_content(entry: FileEntry) -> Tuple[str, str]:
    if isinstance(entry, TrackedFile):
        return entry.file_name, entry.content
    name, content = entry
    return name, content


def render_file_block(file_name: str, content: str) -> str:
    # Content goes in verbatim; no newline is forced before the closing fence.
    return f"File: {file_name}\n```\n{content}```\n\n"


def render(task_type, instruction_text: str, files: Iterable[FileEntry] = ()) -> str:
    """
    Builds the full prompt. Pure: the same inputs always give the same string.

    Order: preamble, instruction text and a blank line, the output format
    block, the "Code Context:" header, then one fenced block per file.
    """
    parts = [
        preamble_for(task_type),
        instruction_text or "",
        "\n\n",
        OUTPUT_FORMAT_BLOCK,
        CONTEXT_HEADER,
    ]
    for entry in files:
        parts.append(render_file_block(*_name_and_content(entry)))
    return "".join(parts)
