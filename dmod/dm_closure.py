"""
Transitive closure of module references.

Two walks over the references of a module being defined:

  - include closure: the include directories needed to compile against the
    referenced modules, third parties and directories;
  - link closure: include directories plus the modules and third-party
    libraries needed to link.

Every defined module stores its own closure in the registry, so a reference to
a module is a flat union with that module's stored closure. Modules are defined
in dependency order, which makes the stored closures final.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from dm_context import ResolverContext
from dm_descriptor import ModuleDescriptor, ModuleKind
from dm_fs import FileSystem, LocalFileSystem
from dm_logger import log_debug, log_warning
from dm_registry import ModuleRegistry, UnknownModuleError
from dm_third_party import ThirdPartyCatalog


# Tokens that restrict the library following them to one build configuration.
CONFIG_SELECTORS = ("debug", "optimized", "general")


@dataclass
class UnknownReferenceError(UnknownModuleError):
    """A reference is neither a third-party name nor a defined module (nor a directory, for includes)."""
    owner: Optional[str] = None


@dataclass(frozen=True)
class LinkClosure:
    include_dirs: Tuple[str, ...] = ()
    link_modules: Tuple[str, ...] = ()
    link_dirs: Tuple[str, ...] = ()
    link_libraries: Tuple[str, ...] = ()


@dataclass
class _Accumulator:
    """Working lists of a single resolution call; duplicates allowed until finish()."""
    include_dirs: List[str] = field(default_factory=list)
    link_modules: List[str] = field(default_factory=list)
    link_dirs: List[str] = field(default_factory=list)
    link_libraries: List[str] = field(default_factory=list)

    def add_descriptor(self, desc: ModuleDescriptor) -> None:
        self.include_dirs.extend(desc.include_dirs)
        self.link_modules.extend(desc.link_modules)
        self.link_dirs.extend(desc.link_dirs)
        self.link_libraries.extend(desc.link_libraries)

    def finish(self) -> LinkClosure:
        return LinkClosure(
            include_dirs=unique(self.include_dirs),
            link_modules=unique(self.link_modules),
            link_dirs=unique(self.link_dirs),
            link_libraries=unique_libraries(self.link_libraries),
        )


def unique(items: Iterable[str]) -> Tuple[str, ...]:
    """Drop repeated items, keeping the first occurrence of each."""
    return tuple(dict.fromkeys(items))


def unique_libraries(tokens: Sequence[str]) -> Tuple[str, ...]:
    """
    Deduplicate a library list whose entries may be prefixed by a selector.

    A selector and the library after it form one unit ("debug foo_d"), so the
    same library under different selectors is kept once per selector. A
    selector that is not followed by a library is dropped.
    """
    units: List[Tuple[Optional[str], str]] = []
    pending: Optional[str] = None
    for tok in tokens:
        if tok in CONFIG_SELECTORS:
            pending = tok
            continue
        units.append((pending, tok))
        pending = None

    flat: List[str] = []
    for selector, lib in dict.fromkeys(units):
        if selector is not None:
            flat.append(selector)
        flat.append(lib)
    return tuple(flat)


class ClosureResolver:
    """
    Resolves references against the third-party catalog, the file system
    (directories, includes only) and the module registry, in that order.

    The resolver only reads the registry; calling it twice with the same
    references gives the same result.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        catalog: ThirdPartyCatalog | None = None,
        fs: FileSystem | None = None,
        context: ResolverContext | None = None,
    ):
        self.registry = registry
        self.catalog = catalog or ThirdPartyCatalog()
        self.fs = fs or LocalFileSystem()
        self.context = context or ResolverContext.default()

    # --- Public API ---

    def resolve_include_closure(
        self, references: Iterable[str], owner: Optional[str] = None
    ) -> Tuple[str, ...]:
        """
        Include directories needed to compile against `references`.

        Each reference is a third-party name (its include dirs), an existing
        directory (itself) or a defined module (its resolved include dirs).
        Referenced modules contribute no link obligations here.
        """
        acc = _Accumulator()
        for ref in references:
            entry = self.catalog.lookup(ref)
            if entry is not None:
                log_debug(self.context, f"include '{ref}': third party")
                acc.include_dirs.extend(entry.include_dirs)
            elif self.fs.is_dir(ref):
                acc.include_dirs.append(ref)
            else:
                desc = self._lookup_module(ref, owner, code="RES-0020", what="include")
                if desc is not None:
                    log_debug(self.context, f"include '{ref}': module")
                    acc.include_dirs.extend(desc.include_dirs)
        return unique(acc.include_dirs)

    def resolve_link_closure(
        self, references: Iterable[str], owner: Optional[str] = None
    ) -> LinkClosure:
        """
        Everything needed to compile and link against `references`.

        Third-party names are leaves. A defined module adds itself to the link
        modules unless it is header-only, then contributes its stored closure.
        """
        acc = _Accumulator()
        for ref in references:
            entry = self.catalog.lookup(ref)
            if entry is not None:
                log_debug(self.context, f"link '{ref}': third party")
                acc.include_dirs.extend(entry.include_dirs)
                acc.link_dirs.extend(entry.link_dirs)
                acc.link_libraries.extend(entry.libraries)
                continue

            desc = self._lookup_module(ref, owner, code="RES-0010", what="link")
            if desc is None:
                continue
            log_debug(self.context, f"link '{ref}': module of type {desc.kind.value}")
            if desc.kind is not ModuleKind.HEADER:
                acc.link_modules.append(desc.name)
            acc.add_descriptor(desc)

        closure = acc.finish()
        stripped = len(acc.link_libraries) - len(closure.link_libraries)
        if stripped and owner is not None:
            log_debug(self.context, f"module '{owner}': dropped {stripped} duplicate or unpaired library token(s)")
        return closure

    # --- Internal helpers ---

    def _lookup_module(
        self, ref: str, owner: Optional[str], *, code: str, what: str
    ) -> Optional[ModuleDescriptor]:
        if self.registry.exists(ref):
            return self.registry.get(ref)

        where = f"module '{owner}'" if owner is not None else "reference list"
        message = (
            f"[{code}] {where}: {what} '{ref}' is neither a third-party library"
            f"{' nor a directory' if what == 'include' else ''} nor a defined module"
            f" -- did you define the modules in the correct order?"
        )
        if self.context.strict_references:
            raise UnknownReferenceError(message, ref, owner)
        log_warning(self.context, f"warning: {message} (ignored)")
        return None
