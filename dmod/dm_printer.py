#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from typing import List, Sequence, Tuple

from dm_backend import ArtifactDirective
from dm_descriptor import ModuleDescriptor


def _format_list(label: str, values: Sequence[str], indent: int) -> List[str]:
    ind = "  " * indent
    if not values:
        return [f"{ind}{label}: <none>"]
    lines = [f"{ind}{label}:"]
    lines.extend(f"{ind}  {v}" for v in values)
    return lines


def _format_sections(header: str, sections: Sequence[Tuple[str, Sequence[str]]]) -> str:
    lines: List[str] = [header]
    for label, values in sections:
        lines.extend(_format_list(label, values, indent=1))
    return "\n".join(lines)


def format_descriptor(desc: ModuleDescriptor) -> str:
    """
    Pretty-print a resolved descriptor:

        === module app (BINARY) ===
          root: /src/app
          sources:
            /src/app/main.cpp
          ...
    """
    return _format_sections(
        f"=== module {desc.name} ({desc.kind.name}) ===\n  root: {desc.root}",
        [
            ("sources", desc.sources),
            ("includes", desc.includes),
            ("links", desc.links),
            ("include dirs", desc.include_dirs),
            ("link modules", desc.link_modules),
            ("link 3rd dirs", desc.link_dirs),
            ("link 3rd", desc.link_libraries),
        ],
    )


def format_directive(directive: ArtifactDirective) -> str:
    if directive.is_executable:
        what = "executable"
    else:
        what = f"{'shared' if directive.shared else 'static'} library"
    return _format_sections(
        f"=== target {directive.name}: {what} ({directive.toolchain} toolchain) ===",
        [
            ("sources", directive.sources),
            ("include dirs", directive.include_dirs),
            ("link dirs", directive.link_dirs),
            ("link modules", directive.link_modules),
            ("link libraries", directive.link_libraries),
        ],
    )
