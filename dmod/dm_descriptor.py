#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ModuleKind(Enum):
    BINARY = "BINARY"
    LIBRARY = "LIBRARY"
    DEVICE_LIBRARY = "CUDA_LIBRARY"
    HEADER = "HEADER"

    @property
    def produces_artifact(self) -> bool:
        return self is not ModuleKind.HEADER

    @property
    def is_library(self) -> bool:
        return self in (ModuleKind.LIBRARY, ModuleKind.DEVICE_LIBRARY)

    @staticmethod
    def from_keyword(word: str) -> Optional['ModuleKind']:
        """Map a declaration keyword to a kind; None if `word` is not a kind keyword."""
        if word == "DEVICE_LIBRARY":
            return ModuleKind.DEVICE_LIBRARY
        for kind in ModuleKind:
            if kind.value == word:
                return kind
        return None


@dataclass(frozen=True)
class ThirdPartyEntry:
    """
    What a third-party symbolic name stands for.

    - include_dirs: directories added to the compile line of every dependent
    - link_dirs:    library search directories
    - libraries:    link library names, possibly with configuration selectors
                    (e.g. ("debug", "foo_d", "optimized", "foo"))
    """
    include_dirs: Tuple[str, ...] = ()
    link_dirs: Tuple[str, ...] = ()
    libraries: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ModuleDescriptor:
    """
    A defined module with its resolved dependency information.

    The declared part (kind, root, sources, includes, links) is what the module
    was defined with. The resolved part is the closure over everything the
    module references, computed once when the module is defined; dependents
    compose it instead of walking the graph again.

    - include_dirs:   own include dirs plus everything inherited
    - link_modules:   modules to link against, never HEADER modules
    - link_dirs:      third-party link directories
    - link_libraries: third-party libraries, selectors kept paired
    """
    name: str
    kind: ModuleKind
    root: str
    sources: Tuple[str, ...] = ()
    includes: Tuple[str, ...] = ()
    links: Tuple[str, ...] = ()

    include_dirs: Tuple[str, ...] = ()
    link_modules: Tuple[str, ...] = ()
    link_dirs: Tuple[str, ...] = ()
    link_libraries: Tuple[str, ...] = ()

    @property
    def is_header_only(self) -> bool:
        return self.kind is ModuleKind.HEADER
