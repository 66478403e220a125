#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Protocol, Sequence, Set


class FileSystem(Protocol):
    """What the resolver and the definer need to know about the file tree."""

    def is_dir(self, path: str) -> bool:
        ...

    def list_sources(self, root: str, suffixes: Sequence[str]) -> List[str]:
        ...


class LocalFileSystem:
    """The real file tree."""

    def is_dir(self, path: str) -> bool:
        return Path(path).is_dir()

    def list_sources(self, root: str, suffixes: Sequence[str]) -> List[str]:
        """
        All files below `root` (recursively) whose suffix is in `suffixes`,
        sorted. A missing root yields no sources.
        """
        root_path = Path(root)
        if not root_path.is_dir():
            return []
        return sorted(
            str(p) for p in root_path.rglob("*")
            if p.suffix in suffixes and p.is_file()
        )


@dataclass
class InMemoryFileSystem:
    """
    A file tree held in memory, for tests and dry runs.

    Paths are POSIX strings. Adding a file implicitly creates its parent
    directories.
    """
    files: Set[str] = field(default_factory=set)
    dirs: Set[str] = field(default_factory=set)

    def add_file(self, path: str) -> None:
        p = PurePosixPath(path)
        self.files.add(str(p))
        for parent in p.parents:
            self.dirs.add(str(parent))

    def add_dir(self, path: str) -> None:
        p = PurePosixPath(path)
        self.dirs.add(str(p))
        for parent in p.parents:
            self.dirs.add(str(parent))

    def is_dir(self, path: str) -> bool:
        return str(PurePosixPath(path)) in self.dirs

    def list_sources(self, root: str, suffixes: Sequence[str]) -> List[str]:
        root_path = PurePosixPath(root)
        return sorted(
            f for f in self.files
            if PurePosixPath(f).suffix in suffixes and root_path in PurePosixPath(f).parents
        )
