"""HEAD, STAGE and named references stored as hex text files."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import CtxError, InvalidHexError, InvalidRefError, RefNotFoundError
from .fsutil import atomic_write
from .object_id import ObjectId


class Refs:
    """Manages references to commits under a repository directory."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)

    @property
    def _refs_dir(self) -> Path:
        return self.root / "refs"

    def read_head(self) -> ObjectId:
        """Return the id HEAD points to."""
        return self._read_ref_file(self.root / "HEAD")

    def write_head(self, object_id: ObjectId) -> None:
        """Point HEAD at ``object_id``."""
        self._write_ref_file(self.root / "HEAD", object_id)

    def read_ref(self, name: str) -> ObjectId:
        """Return the id a named ref such as ``heads/feature`` points to."""
        return self._read_ref_file(self._refs_dir / name)

    def write_ref(self, name: str, object_id: ObjectId) -> None:
        """Point a named ref at ``object_id``, creating directories as needed."""
        self._write_ref_file(self._refs_dir / name, object_id)

    def delete_ref(self, name: str) -> None:
        """Remove a named ref."""
        path = self._refs_dir / name
        if not path.exists():
            raise RefNotFoundError(name)
        path.unlink()

    def list_refs(self) -> list[tuple[str, ObjectId]]:
        """Return all readable named refs as (name, id) pairs sorted by name."""
        refs_dir = self._refs_dir
        if not refs_dir.exists():
            return []
        found = []
        for path in refs_dir.rglob("*"):
            if not path.is_file() or path.suffix == ".tmp":
                continue
            try:
                object_id = self._read_ref_file(path)
            except (CtxError, OSError):
                continue
            found.append((path.relative_to(refs_dir).as_posix(), object_id))
        found.sort(key=lambda item: item[0])
        return found

    def read_stage(self) -> ObjectId | None:
        """Return the STAGE id, or None when there is no staging area."""
        path = self.root / "STAGE"
        if not path.exists():
            return None
        return self._read_ref_file(path)

    def write_stage(self, object_id: ObjectId) -> None:
        """Point STAGE at ``object_id``."""
        self._write_ref_file(self.root / "STAGE", object_id)

    def delete_stage(self) -> None:
        """Remove STAGE if it exists."""
        (self.root / "STAGE").unlink(missing_ok=True)

    @staticmethod
    def _read_ref_file(path: Path) -> ObjectId:
        if not path.exists():
            raise RefNotFoundError(path.name or "unknown")
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidRefError(path, "content is not valid UTF-8") from exc
        trimmed = content.strip()
        length = len(trimmed.encode("utf-8"))
        if length != ObjectId.HEX_LEN:
            raise InvalidRefError(path, f"expected 64 hex chars, got {length}")
        try:
            return ObjectId.from_hex(trimmed)
        except InvalidHexError as exc:
            raise InvalidRefError(path, "invalid hex string") from exc

    @staticmethod
    def _write_ref_file(path: Path, object_id: ObjectId) -> None:
        atomic_write(path, f"{object_id.hex()}\n".encode("ascii"))