"""
Keyword form of a module declaration.

    <name> [BINARY|LIBRARY|CUDA_LIBRARY|HEADER]
           [SOURCES <source files>]
           [LINKS <other modules and third parties>]
           [INCLUDES <other modules, third parties or directories>]

A kind keyword may appear anywhere and only sets the kind. SOURCES, LINKS and
INCLUDES switch the list that following plain words are appended to. Giving
SOURCES or INCLUDES at all replaces the corresponding default, even when no
word follows. A plain word before any list keyword is an error.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from dm_descriptor import ModuleKind


LIST_KEYWORDS = ("SOURCES", "INCLUDES", "LINKS")
KIND_KEYWORDS = ("BINARY", "LIBRARY", "CUDA_LIBRARY", "DEVICE_LIBRARY", "HEADER")


@dataclass
class InvalidConfigurationError(Exception):
    """A module declaration or a configuration input cannot be understood."""
    message: str
    filename: Optional[str] = None
    line: Optional[int] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ModuleDeclaration:
    """
    A module as declared, before defaults are applied.

    `None` in kind, sources or includes means "use the default".
    """
    name: str
    root: str
    kind: Optional[ModuleKind] = None
    sources: Optional[List[str]] = None
    includes: Optional[List[str]] = None
    links: List[str] = field(default_factory=list)
    filename: Optional[str] = None
    line: Optional[int] = None


def is_keyword(word: str) -> bool:
    return word in LIST_KEYWORDS or word in KIND_KEYWORDS


def check_module_name(name: str, *, filename: Optional[str] = None, line: Optional[int] = None) -> None:
    if not name or any(c.isspace() for c in name):
        raise InvalidConfigurationError(
            f"[CFG-0020] invalid module name {name!r}", filename, line
        )
    if is_keyword(name):
        raise InvalidConfigurationError(
            f"[CFG-0020] invalid module name '{name}': reserved keyword", filename, line
        )


def parse_module_args(
    name: str,
    root: str,
    args: Sequence[str],
    *,
    filename: Optional[str] = None,
    line: Optional[int] = None,
) -> ModuleDeclaration:
    """
    Parse the keyword arguments of one module declaration.

    Raises InvalidConfigurationError on an invalid name or an argument that is
    neither a keyword nor part of a SOURCES/LINKS/INCLUDES list.
    """
    check_module_name(name, filename=filename, line=line)

    decl = ModuleDeclaration(name=name, root=root, filename=filename, line=line)
    current: Optional[List[str]] = None

    for arg in args:
        kind = ModuleKind.from_keyword(arg)
        if kind is not None:
            decl.kind = kind
        elif arg == "SOURCES":
            if decl.sources is None:
                decl.sources = []
            current = decl.sources
        elif arg == "INCLUDES":
            if decl.includes is None:
                decl.includes = []
            current = decl.includes
        elif arg == "LINKS":
            current = decl.links
        elif current is not None:
            current.append(arg)
        else:
            raise InvalidConfigurationError(
                f"[CFG-0010] unknown argument '{arg}' in declaration of module '{name}'",
                filename,
                line,
            )

    return decl
