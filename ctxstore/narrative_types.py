"""Value types and file-format helpers for the narrative space."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .object_id import ObjectId

STATUS_MARKER = "**Status:**"
TASK_PREFIX = "task_"
TASK_SUFFIX = ".md"

_U32_MAX = 0xFFFFFFFF
_DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class TaskInfo:
    """A task file: its numeric id, full path and path relative to the narrative root."""

    task_id: int
    path: Path
    relative_path: str


@dataclass(frozen=True)
class NarrativeRef:
    """A narrative file recorded in a commit, pointing at the blob holding its content."""

    path: str
    role: str
    blob_id: ObjectId
    stream: str | None = None


def task_filename(task_id: int) -> str:
    """Return the file name of a task, e.g. ``task_0042.md`` for id 42."""
    if not 0 <= task_id <= _U32_MAX:
        raise ValueError(f"task id out of range: {task_id}")
    return f"{TASK_PREFIX}{task_id:04d}{TASK_SUFFIX}"


def parse_task_id(filename: str) -> int | None:
    """Return the id encoded in a ``task_NNNN.md`` file name, or None if it is not one."""
    if len(filename) < len(TASK_PREFIX) + len(TASK_SUFFIX):
        return None
    if not (filename.startswith(TASK_PREFIX) and filename.endswith(TASK_SUFFIX)):
        return None
    number = filename[len(TASK_PREFIX): len(filename) - len(TASK_SUFFIX)]
    if number.startswith("+"):
        number = number[1:]
    if not number or not set(number) <= _DIGITS:
        return None
    value = int(number)
    return value if value <= _U32_MAX else None


def task_content(title: str, body: str) -> str:
    """Return the Markdown text of a newly created, open task."""
    if not body:
        return f"# {title}\n\n{STATUS_MARKER} open\n"
    return f"# {title}\n\n{STATUS_MARKER} open\n\n{body}\n"


def replace_status(content: str, status: str) -> str:
    """Return ``content`` with the text after the status marker set to ``status``.

    The status is only replaced when the marker line ends with a newline.
    Raises ValueError when the content has no status marker at all.
    """
    start = content.find(STATUS_MARKER)
    if start < 0:
        raise ValueError(f"missing '{STATUS_MARKER}' line")
    end = content.find("\n", start)
    if end < 0:
        return content
    return f"{content[:start]}{STATUS_MARKER} {status}{content[end:]}"