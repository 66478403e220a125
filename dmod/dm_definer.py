#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from dm_args import InvalidConfigurationError, ModuleDeclaration, check_module_name, parse_module_args
from dm_backend import ArtifactBackend, ArtifactDirective, RecordingBackend
from dm_closure import ClosureResolver, unique
from dm_context import ResolverContext
from dm_descriptor import ModuleDescriptor, ModuleKind
from dm_diagnostics import Diagnostic, diag_from_error
from dm_fs import FileSystem, LocalFileSystem
from dm_logger import log_debug, log_info, log_stage, log_warning
from dm_registry import DuplicateModuleError, ModuleRegistry, UnknownModuleError
from dm_third_party import ThirdPartyCatalog


@dataclass
class ConfigurationResult:
    """
    Outcome of a configuration pass.

    Contains:
      - the registry with every module that was fully defined
      - the artifact directives of those modules, in definition order
      - diagnostics for the modules that could not be defined
    """
    registry: ModuleRegistry
    directives: List[ArtifactDirective] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    aborted: bool = False

    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.diagnostics)

    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.diagnostics)


class ModuleDefiner:
    """
    Defines modules one at a time, in dependency order:
      - apply defaults
      - resolve the include closure of the module's includes
      - resolve the link closure of the module's links
      - hand an artifact directive to the backend (not for HEADER modules)
      - store the resolved descriptor in the registry

    Entry points:
      - define_module(name, root, ...): define from Python values.
      - define_module_from_args(name, root, args): define from keyword arguments.
      - configure(declarations): define a whole list, collecting diagnostics.
    """

    def __init__(
        self,
        catalog: ThirdPartyCatalog | None = None,
        fs: FileSystem | None = None,
        backend: ArtifactBackend | None = None,
        context: ResolverContext | None = None,
        registry: ModuleRegistry | None = None,
    ):
        self.context = context or ResolverContext.default()
        self.catalog = catalog or ThirdPartyCatalog()
        self.fs = fs or LocalFileSystem()
        self.backend = backend if backend is not None else RecordingBackend()
        self.registry = registry if registry is not None else ModuleRegistry()
        self.resolver = ClosureResolver(self.registry, self.catalog, self.fs, self.context)

    # --- Public API ---

    def define_module(
        self,
        name: str,
        root: str,
        kind: ModuleKind | str | None = None,
        sources: Optional[Sequence[str]] = None,
        includes: Optional[Sequence[str]] = None,
        links: Optional[Sequence[str]] = None,
    ) -> ModuleDescriptor:
        """
        Define module `name` rooted at `root` and return its resolved descriptor.

        Defaults: kind BINARY, sources all files under `root` with the configured
        suffixes, includes `[root]`, no links.

        Raises DuplicateModuleError, UnknownReferenceError or
        InvalidConfigurationError. On error nothing is registered and no
        artifact is requested.
        """
        check_module_name(name)
        kind = self._coerce_kind(name, kind)
        root = str(root)

        if self.registry.exists(name):
            if not self.context.allow_redefinition:
                raise DuplicateModuleError(f"[REG-0010] module '{name}' is already defined", name)
            log_warning(self.context, f"warning: module '{name}' is defined again; the earlier definition is replaced")

        if sources is None:
            sources = self.fs.list_sources(root, self.context.source_suffixes)
        own_include_dirs: Tuple[str, ...] = ()
        if includes is None:
            own_include_dirs = (root,)
            includes = [root]
        links = list(links or [])

        log_stage(self.context, "Defining", name)
        log_info(self.context, f"creating target '{name}' of type '{kind.value}'")
        log_info(self.context, f"   includes     : '{';'.join(includes)}'")
        log_info(self.context, f"   links        : '{';'.join(links)}'")

        if own_include_dirs:
            # The default include is the root itself, never a reference.
            include_dirs = own_include_dirs
        else:
            include_dirs = self.resolver.resolve_include_closure(includes, owner=name)
        closure = self.resolver.resolve_link_closure(links, owner=name)

        descriptor = ModuleDescriptor(
            name=name,
            kind=kind,
            root=root,
            sources=tuple(sources),
            includes=tuple(includes),
            links=tuple(links),
            include_dirs=unique(include_dirs + closure.include_dirs),
            link_modules=closure.link_modules,
            link_dirs=closure.link_dirs,
            link_libraries=closure.link_libraries,
        )

        log_debug(self.context, f"   include dirs : '{';'.join(descriptor.include_dirs)}'")
        log_debug(self.context, f"   link modules : '{';'.join(descriptor.link_modules)}'")
        log_debug(self.context, f"   link 3rd dirs: '{';'.join(descriptor.link_dirs)}'")
        log_debug(self.context, f"   link 3rd     : '{';'.join(descriptor.link_libraries)}'")

        if kind.produces_artifact:
            self.backend.add_target(self._directive_for(descriptor))
            log_debug(self.context, f"   {kind.value.lower()} sources: '{';'.join(descriptor.sources)}'")
        else:
            log_debug(self.context, "   this is a header only module")

        self.registry.put(name, descriptor, replace=self.context.allow_redefinition)
        return descriptor

    def define_module_from_args(self, name: str, root: str, args: Sequence[str]) -> ModuleDescriptor:
        """Define a module from its keyword form, e.g. ["LIBRARY", "LINKS", "core", "zlib"]."""
        return self.define(parse_module_args(name, str(root), args))

    def define(self, decl: ModuleDeclaration) -> ModuleDescriptor:
        return self.define_module(
            decl.name,
            decl.root,
            kind=decl.kind,
            sources=decl.sources,
            includes=decl.includes,
            links=decl.links,
        )

    def configure(self, declarations: Iterable[ModuleDeclaration]) -> ConfigurationResult:
        """
        Define `declarations` in order.

        A module that fails to resolve is reported and skipped; the pass goes on
        with the next declaration. An invalid configuration stops the pass.
        """
        result = ConfigurationResult(registry=self.registry)
        count = 0
        for decl in declarations:
            try:
                self.define(decl)
                count += 1
            except InvalidConfigurationError as e:
                result.diagnostics.append(
                    diag_from_error("error", e, module_name=decl.name,
                                    filename=e.filename or decl.filename, line=e.line or decl.line)
                )
                result.aborted = True
                break
            except (DuplicateModuleError, UnknownModuleError) as e:
                result.diagnostics.append(
                    diag_from_error("error", e, module_name=decl.name, filename=decl.filename, line=decl.line)
                )

        if isinstance(self.backend, RecordingBackend):
            result.directives = list(self.backend.directives)
        log_info(
            self.context,
            f"Configuration {'aborted' if result.aborted else 'complete'}: {count} module(s) defined, "
            f"{len([d for d in result.diagnostics if d.kind == 'error'])} error(s)",
        )
        return result

    # --- Internal helpers ---

    def _coerce_kind(self, name: str, kind: ModuleKind | str | None) -> ModuleKind:
        if kind is None:
            return ModuleKind.BINARY
        if isinstance(kind, ModuleKind):
            return kind
        resolved = ModuleKind.from_keyword(str(kind))
        if resolved is None:
            raise InvalidConfigurationError(f"[CFG-0030] module '{name}': unknown module type '{kind}'")
        return resolved

    def _directive_for(self, desc: ModuleDescriptor) -> ArtifactDirective:
        return ArtifactDirective(
            name=desc.name,
            kind=desc.kind,
            toolchain="device" if desc.kind is ModuleKind.DEVICE_LIBRARY else "host",
            sources=desc.sources,
            include_dirs=desc.include_dirs,
            link_modules=desc.link_modules,
            link_libraries=desc.link_libraries + tuple(self.context.extra_link_libraries),
            link_dirs=desc.link_dirs,
            shared=desc.kind.is_library and self.context.build_shared_libs,
        )
