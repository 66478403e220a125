"""
Line-based module manifest.

    # comment
    [core]
    core LIBRARY INCLUDES include
    [app]
    app LINKS core zlib

A `[dir]` line makes `dir` (relative to the manifest) the source directory of
the declarations that follow; before the first one it is the manifest's own
directory. Every other non-empty line is one module declaration in keyword
form, split with shell quoting rules. Declarations are returned in file order.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import os
import shlex
from pathlib import Path
from typing import List, Optional

from dm_args import InvalidConfigurationError, ModuleDeclaration, parse_module_args
from dm_fs import FileSystem, LocalFileSystem
from dm_third_party import ThirdPartyCatalog


def _anchor(base: Path, token: str) -> str:
    if os.path.isabs(token):
        return token
    return str(base / token)


def parse_manifest(
    text: str,
    base_dir: str | Path,
    *,
    filename: Optional[str] = None,
    catalog: ThirdPartyCatalog | None = None,
    fs: FileSystem | None = None,
) -> List[ModuleDeclaration]:
    """
    Parse manifest `text` whose relative paths are relative to `base_dir`.

    Relative SOURCES are anchored on the current source directory. A relative
    INCLUDES entry is anchored when it is not a third-party name and names a
    directory below the current source directory; otherwise it stays a
    reference.
    """
    catalog = catalog or ThirdPartyCatalog()
    fs = fs or LocalFileSystem()
    base_dir = Path(base_dir)
    current_dir = base_dir
    decls: List[ModuleDeclaration] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if stripped.startswith("["):
            if not stripped.endswith("]") or len(stripped) < 3:
                raise InvalidConfigurationError(
                    f"[CFG-0040] malformed directory line {stripped!r}", filename, lineno
                )
            current_dir = base_dir / stripped[1:-1].strip()
            continue

        try:
            words = shlex.split(stripped, comments=True)
        except ValueError as e:
            raise InvalidConfigurationError(f"[CFG-0040] {e}", filename, lineno) from None
        if not words:
            continue

        decl = parse_module_args(words[0], str(current_dir), words[1:], filename=filename, line=lineno)
        if decl.sources is not None:
            decl.sources = [_anchor(current_dir, s) for s in decl.sources]
        if decl.includes is not None:
            decl.includes = [
                _anchor(current_dir, inc)
                if inc not in catalog and not os.path.isabs(inc) and fs.is_dir(_anchor(current_dir, inc))
                else inc
                for inc in decl.includes
            ]
        decls.append(decl)

    return decls


def load_manifest(
    path: str | Path,
    *,
    catalog: ThirdPartyCatalog | None = None,
    fs: FileSystem | None = None,
) -> List[ModuleDeclaration]:
    """Read and parse the manifest at `path`; OSError and UnicodeDecodeError propagate to the caller."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return parse_manifest(text, path.parent, filename=str(path), catalog=catalog, fs=fs)
