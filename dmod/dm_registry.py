#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from typing import Dict, Iterator, List

from dm_descriptor import ModuleDescriptor


@dataclass
class DuplicateModuleError(Exception):
    """Raised when a module name is defined a second time."""
    message: str
    name: str

    def __str__(self) -> str:
        return self.message


@dataclass
class UnknownModuleError(Exception):
    """Raised when a module name was never defined."""
    message: str
    name: str

    def __str__(self) -> str:
        return self.message


class ModuleRegistry:
    """
    Resolved descriptors of the modules defined so far in one configuration pass.

    Entries are written once, when a module is defined, and read by name when
    later modules reference it. Iteration follows definition order.
    """

    def __init__(self) -> None:
        self._modules: Dict[str, ModuleDescriptor] = {}

    def put(self, name: str, descriptor: ModuleDescriptor, *, replace: bool = False) -> None:
        if name in self._modules and not replace:
            raise DuplicateModuleError(
                f"[REG-0010] module '{name}' is already defined", name
            )
        # A replaced entry moves to the end, where it was (re)defined.
        self._modules.pop(name, None)
        self._modules[name] = descriptor

    def get(self, name: str) -> ModuleDescriptor:
        try:
            return self._modules[name]
        except KeyError:
            raise UnknownModuleError(
                f"[REG-0020] module '{name}' does not exist -- "
                f"did you define the modules in the correct order?",
                name,
            ) from None

    def exists(self, name: str) -> bool:
        return name in self._modules

    def names(self) -> List[str]:
        return list(self._modules.keys())

    def descriptors(self) -> List[ModuleDescriptor]:
        return list(self._modules.values())

    def __contains__(self, name: str) -> bool:
        return self.exists(name)

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[ModuleDescriptor]:
        return iter(self.descriptors())
