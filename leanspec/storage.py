"""Read-only storage access for spec documents.

Validators depend on the ``SpecStorage`` protocol rather than on the
filesystem directly so that callers can supply other backends.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Protocol


class SpecStorage(Protocol):
    """Storage collaborator consumed by the validators. Never written to."""

    def read_file(self, path: str) -> str:
        ...

    def list_files(self, directory: str) -> List[str]:
        ...

    def exists(self, path: str) -> bool:
        ...


class FileSystemStorage:
    """``SpecStorage`` backed by the local filesystem."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def read_file(self, path: str) -> str:
        return Path(path).read_text(encoding=self.encoding)

    def list_files(self, directory: str) -> List[str]:
        """Names of the regular files directly inside ``directory``, sorted."""
        return sorted(entry.name for entry in Path(directory).iterdir() if entry.is_file())

    def exists(self, path: str) -> bool:
        return Path(path).exists()
