#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import os
from dataclasses import dataclass
from typing import Optional


DIAGNOSTIC_CODE_FAMILIES = {
    "REG": [
        "REG-0010",  # module defined twice
        "REG-0020",  # module never defined
    ],
    "RES": [
        "RES-0010",  # unknown reference in LINKS
        "RES-0020",  # unknown reference in INCLUDES
    ],
    "CFG": [
        "CFG-0010",  # unknown argument in a module declaration
        "CFG-0020",  # missing or invalid module name
        "CFG-0030",  # unknown module kind
        "CFG-0040",  # malformed manifest line
        "CFG-0050",  # malformed third-party catalog
    ],
    "DMC": [
        "DMC-0010",  # manifest cannot be read
        "DMC-0020",  # requested module not defined
    ],
}


@dataclass
class Diagnostic:
    kind: str  # "error" or "warning"
    message: str
    module_name: Optional[str] = None  # module being defined
    filename: Optional[str] = None  # manifest path

    line: Optional[int] = None
    column: Optional[int] = None

    def format(self) -> str:
        loc = ""
        if self.filename is not None:
            loc += f"{os.path.abspath(str(self.filename))}"
            if self.line is not None:
                loc += f":{self.line}"
                if self.column is not None:
                    loc += f":{self.column}"
        if self.module_name is not None:
            loc += f"({self.module_name})"
        if loc:
            loc += ": "
        return f"{loc}{self.kind}: {self.message}"


def diag_from_error(
        kind: str,
        error: Exception,
        *,
        module_name: Optional[str],
        filename: Optional[str] = None,
        line: Optional[int] = None,
) -> Diagnostic:
    message = getattr(error, "message", None) or str(error)
    return Diagnostic(
        kind=kind,
        message=message,
        module_name=module_name,
        filename=filename,
        line=line,
    )
