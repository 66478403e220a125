#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import sys
from pathlib import Path
from textwrap import dedent

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dm_backend import RecordingBackend
from dm_context import ResolverContext
from dm_definer import ModuleDefiner
from dm_fs import InMemoryFileSystem
from dm_third_party import ThirdPartyCatalog


@pytest.fixture
def fs() -> InMemoryFileSystem:
    """An in-memory tree with a few module roots under /src."""
    tree = InMemoryFileSystem()
    for f in [
        "/src/core/core.cpp",
        "/src/core/detail/impl.cpp",
        "/src/core/core.h",
        "/src/util/util.cpp",
        "/src/app/main.cpp",
        "/src/gpu/kernels.cpp",
        "/src/gpu/kernels.cu",
    ]:
        tree.add_file(f)
    for d in ["/src/headers", "/src/headers/include", "/src/core/include"]:
        tree.add_dir(d)
    return tree


@pytest.fixture
def catalog() -> ThirdPartyCatalog:
    cat = ThirdPartyCatalog()
    cat.add("zlib", include_dirs=["/usr/include"], link_dirs=["/usr/lib"], libraries=["z"])
    cat.add(
        "boost",
        include_dirs=["/opt/boost/include"],
        link_dirs=["/opt/boost/lib"],
        libraries=["debug", "boost_system-d", "optimized", "boost_system"],
    )
    return cat


@pytest.fixture
def context() -> ResolverContext:
    return ResolverContext.default()


@pytest.fixture
def make_definer(fs, catalog):
    """
    Build a ModuleDefiner over the in-memory tree and test catalog.

    Usage:
        def test_something(make_definer):
            definer = make_definer(strict_references=False)
    """

    def _make(**context_options) -> ModuleDefiner:
        context = ResolverContext(**context_options)
        return ModuleDefiner(catalog=catalog, fs=fs, backend=RecordingBackend(), context=context)

    return _make


@pytest.fixture
def definer(make_definer) -> ModuleDefiner:
    return make_definer()


@pytest.fixture
def write_file(tmp_path: Path):
    def _write(rel: str, content: str = "") -> Path:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(content), encoding="utf-8")
        return path

    return _write


def has_error_code(diagnostics, code: str) -> bool:
    """Check if any diagnostic contains the given code, e.g. "RES-0010"."""
    if not code.startswith("["):
        code = f"[{code}]"
    return any(code in d.message for d in diagnostics)
