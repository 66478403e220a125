#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import pytest

from dm_closure import ClosureResolver, LinkClosure, UnknownReferenceError
from dm_context import ResolverContext
from dm_descriptor import ModuleDescriptor, ModuleKind
from dm_registry import ModuleRegistry


def _put(reg, name, kind=ModuleKind.LIBRARY, **resolved):
    resolved.setdefault("include_dirs", (f"/src/{name}",))
    reg.put(name, ModuleDescriptor(name=name, kind=kind, root=f"/src/{name}", **resolved))


@pytest.fixture
def registry() -> ModuleRegistry:
    return ModuleRegistry()


@pytest.fixture
def resolver(registry, catalog, fs) -> ClosureResolver:
    return ClosureResolver(registry, catalog, fs, ResolverContext.default())


def test_empty_references_give_empty_closure(resolver):
    assert resolver.resolve_link_closure([]) == LinkClosure()


def test_third_party_is_a_leaf(resolver):
    closure = resolver.resolve_link_closure(["zlib"])

    assert closure.include_dirs == ("/usr/include",)
    assert closure.link_dirs == ("/usr/lib",)
    assert closure.link_libraries == ("z",)
    assert closure.link_modules == ()


def test_module_reference_composes_stored_closure(registry, resolver):
    _put(registry, "c")
    _put(registry, "b", include_dirs=("/src/b", "/src/c"), link_modules=("c",),
         link_dirs=("/usr/lib",), link_libraries=("z",))

    closure = resolver.resolve_link_closure(["b"])

    assert closure.link_modules == ("b", "c")
    assert closure.include_dirs == ("/src/b", "/src/c")
    assert closure.link_dirs == ("/usr/lib",)
    assert closure.link_libraries == ("z",)


def test_header_module_is_not_linked(registry, resolver):
    _put(registry, "h", kind=ModuleKind.HEADER, include_dirs=("/src/h/include",))

    closure = resolver.resolve_link_closure(["h"])

    assert closure.link_modules == ()
    assert closure.include_dirs == ("/src/h/include",)


def test_header_module_passes_on_its_own_links(registry, resolver):
    _put(registry, "lib")
    _put(registry, "h", kind=ModuleKind.HEADER, link_modules=("lib",), link_libraries=("z",))

    closure = resolver.resolve_link_closure(["h"])

    assert closure.link_modules == ("lib",)
    assert closure.link_libraries == ("z",)


def test_diamond_contributes_once(registry, resolver):
    _put(registry, "d", link_libraries=("z",), link_dirs=("/usr/lib",))
    _put(registry, "b", include_dirs=("/src/b", "/src/d"), link_modules=("d",),
         link_libraries=("z",), link_dirs=("/usr/lib",))
    _put(registry, "c", include_dirs=("/src/c", "/src/d"), link_modules=("d",),
         link_libraries=("z",), link_dirs=("/usr/lib",))

    closure = resolver.resolve_link_closure(["b", "c", "zlib"])

    assert closure.link_modules == ("b", "d", "c")
    assert closure.include_dirs == ("/src/b", "/src/d", "/src/c", "/usr/include")
    assert closure.link_libraries == ("z",)
    assert closure.link_dirs == ("/usr/lib",)


def test_third_party_takes_priority_over_module(registry, resolver):
    _put(registry, "zlib")

    closure = resolver.resolve_link_closure(["zlib"])

    assert closure.link_modules == ()
    assert closure.link_libraries == ("z",)


def test_directories_are_not_link_references(resolver):
    with pytest.raises(UnknownReferenceError) as exc:
        resolver.resolve_link_closure(["/src/core"], owner="app")

    assert "[RES-0010]" in exc.value.message
    assert exc.value.name == "/src/core"


def test_unknown_link_raises_before_anything_else(registry, resolver):
    _put(registry, "b")

    with pytest.raises(UnknownReferenceError) as exc:
        resolver.resolve_link_closure(["b", "ghost"], owner="app")

    assert exc.value.owner == "app"
    assert "link 'ghost'" in exc.value.message


def test_unknown_link_is_skipped_when_permissive(registry, catalog, fs, capsys):
    _put(registry, "b")
    resolver = ClosureResolver(registry, catalog, fs, ResolverContext(strict_references=False))

    closure = resolver.resolve_link_closure(["ghost", "b"], owner="app")

    assert closure.link_modules == ("b",)
    assert "[RES-0010]" in capsys.readouterr().err


def test_link_closure_is_idempotent_and_does_not_touch_registry(registry, resolver):
    _put(registry, "b", link_libraries=("z",))
    before = registry.names()

    first = resolver.resolve_link_closure(["b", "zlib", "boost"])
    second = resolver.resolve_link_closure(["b", "zlib", "boost"])

    assert first == second
    assert registry.names() == before
