#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Tuple

from dm_descriptor import ModuleKind


@dataclass(frozen=True)
class ArtifactDirective:
    """
    Request to the build backend for one compiled module.

    - toolchain:      "host", or "device" for accelerator libraries
    - link_libraries: resolved third-party libraries, then the configured extras
    - shared:         libraries only; True for a shared object, False for an archive
    """
    name: str
    kind: ModuleKind
    toolchain: str
    sources: Tuple[str, ...] = ()
    include_dirs: Tuple[str, ...] = ()
    link_modules: Tuple[str, ...] = ()
    link_libraries: Tuple[str, ...] = ()
    link_dirs: Tuple[str, ...] = ()
    shared: bool = False

    @property
    def is_executable(self) -> bool:
        return self.kind is ModuleKind.BINARY


class ArtifactBackend(Protocol):
    def add_target(self, directive: ArtifactDirective) -> None:
        """Materialize (or schedule) the build target described by `directive`."""


@dataclass
class RecordingBackend:
    """Keeps the directives it receives, in order; the build is left to the caller."""
    directives: List[ArtifactDirective] = field(default_factory=list)
    _by_name: Dict[str, ArtifactDirective] = field(default_factory=dict)

    def add_target(self, directive: ArtifactDirective) -> None:
        if directive.name in self._by_name:
            self.directives = [d for d in self.directives if d.name != directive.name]
        self._by_name[directive.name] = directive
        self.directives.append(directive)

    def get(self, name: str) -> Optional[ArtifactDirective]:
        return self._by_name.get(name)

    def __len__(self) -> int:
        return len(self.directives)
