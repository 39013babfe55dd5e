"""The narrative space: Markdown logs, tasks and notes kept beside the store."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from .errors import DeserializationError
from .fsutil import atomic_write
from .narrative_types import (
    STATUS_MARKER,
    NarrativeRef,
    TaskInfo,
    parse_task_id,
    replace_status,
    task_content,
    task_filename,
)
from .object_id import ObjectId
from .object_store import ObjectStore


class NarrativeSpace:
    """Manages the ``narrative/`` directory of a repository.

    It holds ``log/`` with daily journal files (``YYYY-MM-DD.md``), ``tasks/``
    with task files (``task_NNNN.md``) and any other Markdown documents.
    """

    def __init__(self, ctx_dir: str | os.PathLike[str]) -> None:
        self.root = Path(ctx_dir) / "narrative"

    @property
    def _log_dir(self) -> Path:
        return self.root / "log"

    @property
    def _tasks_dir(self) -> Path:
        return self.root / "tasks"

    @staticmethod
    def read_from_blob(store: ObjectStore, blob_id: ObjectId) -> str:
        """Return the text of a narrative blob held in ``store``."""
        data = store.get_blob(blob_id)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DeserializationError(
                f"Narrative blob contains invalid UTF-8: {exc}"
            ) from exc

    def ensure_structure(self) -> None:
        """Create the ``log/`` and ``tasks/`` directories if they are missing."""
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._tasks_dir.mkdir(parents=True, exist_ok=True)

    def append_log(self, date: str, time: str, entry: str) -> str:
        """Append a timestamped entry to the day's log and return its relative path."""
        filename = f"{date}.md"
        path = self._log_dir / filename
        with open(path, "ab") as handle:
            if os.fstat(handle.fileno()).st_size == 0:
                handle.write(f"# {date}\n\n".encode("utf-8"))
            handle.write(f"### {time}\n\n".encode("utf-8"))
            handle.write(f"{entry}\n\n".encode("utf-8"))
            handle.flush()
            os.fsync(handle.fileno())
        return f"log/{filename}"

    def create_task(self, title: str, body: str) -> TaskInfo:
        """Create a new open task numbered one past the highest existing id."""
        task_id = self._next_task_id()
        filename = task_filename(task_id)
        path = self._tasks_dir / filename
        atomic_write(path, task_content(title, body).encode("utf-8"))
        return TaskInfo(task_id=task_id, path=path, relative_path=f"tasks/{filename}")

    def update_task(self, task_id: int, status: str, note: str) -> str:
        """Set a task's status, optionally append a note, and return its relative path."""
        filename = task_filename(task_id)
        path = self._tasks_dir / filename
        relative_path = f"tasks/{filename}"

        if not path.exists():
            if not self._tasks_dir.exists():
                raise FileNotFoundError(
                    f"Task #{task_id:04d} not found: tasks directory doesn't exist. "
                    "Try running 'ctx add task' first."
                )
            try:
                available = ", ".join(f"#{i:04d}" for i in self._list_task_ids())
            except OSError:
                available = ""
            raise FileNotFoundError(
                f"Task #{task_id:04d} not found at {relative_path}. "
                f"Available tasks: {available}"
            )

        try:
            content = path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError(f"Failed to read task #{task_id:04d}: {exc}") from exc
        except OSError as exc:
            raise type(exc)(
                exc.errno, f"Failed to read task #{task_id:04d}: {exc}"
            ) from exc

        try:
            content = replace_status(content, status)
        except ValueError:
            raise ValueError(
                f"Task #{task_id:04d} is malformed: missing '{STATUS_MARKER}' "
                f"line in {relative_path}"
            ) from None

        if note:
            content = f"{content}\n---\n\n{note}\n"

        atomic_write(path, content.encode("utf-8"))
        return relative_path

    def read_file(self, relative_path: str) -> bytes:
        """Return the bytes of a narrative file given relative to the root."""
        path = self.root / relative_path
        if not path.exists():
            raise FileNotFoundError(f"Narrative file not found: {relative_path}")
        return path.read_bytes()

    def list_files(self) -> list[str]:
        """Return the relative paths of all Markdown files, sorted."""
        return sorted(self._walk_markdown(self.root))

    def snapshot_changed(
        self,
        store: ObjectStore,
        previous_refs: Iterable[NarrativeRef],
        role: str,
    ) -> list[NarrativeRef]:
        """Store every narrative file and return refs for those new or changed."""
        previous = {ref.path: ref.blob_id for ref in previous_refs}
        changed = []
        for relative_path in self.list_files():
            blob_id = store.put_blob(self.read_file(relative_path))
            if previous.get(relative_path) != blob_id:
                changed.append(
                    NarrativeRef(path=relative_path, role=role, blob_id=blob_id)
                )
        changed.sort(key=lambda ref: ref.path)
        return changed

    def _list_task_ids(self) -> list[int]:
        if not self._tasks_dir.exists():
            return []
        ids = (parse_task_id(entry.name) for entry in self._tasks_dir.iterdir())
        return sorted(task_id for task_id in ids if task_id is not None)

    def _next_task_id(self) -> int:
        ids = self._list_task_ids()
        return (ids[-1] if ids else 0) + 1

    def _walk_markdown(self, directory: Path) -> Iterator[str]:
        if not directory.exists():
            return
        for path in directory.iterdir():
            if path.is_dir():
                yield from self._walk_markdown(path)
            elif path.suffix == ".md":
                yield path.relative_to(self.root).as_posix()