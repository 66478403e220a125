#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from dm_args import InvalidConfigurationError
from dm_descriptor import ThirdPartyEntry


_ENTRY_KEYS = ("include_dirs", "link_dirs", "libraries")


class ThirdPartyCatalog:
    """
    Symbolic names of external libraries.

    Lookup rule: a reference is a third-party name if and only if the catalog
    has an entry for it; such names take priority over module names.
    """

    def __init__(self, entries: Optional[Dict[str, ThirdPartyEntry]] = None) -> None:
        self._entries: Dict[str, ThirdPartyEntry] = dict(entries or {})

    def add(
        self,
        name: str,
        include_dirs: Iterable[str] = (),
        link_dirs: Iterable[str] = (),
        libraries: Iterable[str] = (),
    ) -> ThirdPartyEntry:
        entry = ThirdPartyEntry(
            include_dirs=tuple(include_dirs),
            link_dirs=tuple(link_dirs),
            libraries=tuple(libraries),
        )
        self._entries[name] = entry
        return entry

    def lookup(self, name: str) -> Optional[ThirdPartyEntry]:
        return self._entries.get(name)

    def names(self) -> List[str]:
        return sorted(self._entries.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def update_from_json_file(self, path: str | Path) -> None:
        """
        Add the entries of a JSON catalog file. Later files override earlier ones.

        Format:
            {"zlib": {"include_dirs": ["/usr/include"],
                      "link_dirs": ["/usr/lib"],
                      "libraries": ["z"]}}

        Every key of an entry is optional. Raises InvalidConfigurationError
        if the file is not valid JSON or does not have this shape.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise InvalidConfigurationError(
                f"[CFG-0050] cannot read third-party catalog: {e}", str(path)
            ) from None
        except json.JSONDecodeError as e:
            raise InvalidConfigurationError(
                f"[CFG-0050] third-party catalog is not valid JSON: {e.msg}",
                str(path),
                e.lineno,
            ) from None

        if not isinstance(data, dict):
            raise InvalidConfigurationError(
                "[CFG-0050] third-party catalog must be a JSON object", str(path)
            )

        for name, raw in data.items():
            if not isinstance(raw, dict):
                raise InvalidConfigurationError(
                    f"[CFG-0050] catalog entry '{name}' must be a JSON object", str(path)
                )
            unknown = sorted(set(raw) - set(_ENTRY_KEYS))
            if unknown:
                raise InvalidConfigurationError(
                    f"[CFG-0050] catalog entry '{name}' has unknown key(s): {', '.join(unknown)}",
                    str(path),
                )
            values = {}
            for key in _ENTRY_KEYS:
                value = raw.get(key, [])
                if isinstance(value, str):
                    value = [value]
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise InvalidConfigurationError(
                        f"[CFG-0050] catalog entry '{name}': '{key}' must be a list of strings",
                        str(path),
                    )
                values[key] = value
            self.add(name, **values)

    @classmethod
    def from_json_files(cls, paths: Iterable[str | Path]) -> 'ThirdPartyCatalog':
        catalog = cls()
        for path in paths:
            catalog.update_from_json_file(path)
        return catalog
