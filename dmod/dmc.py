#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import argparse
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dm_args import InvalidConfigurationError
from dm_backend import RecordingBackend
from dm_context import ResolverContext, LogLevel
from dm_definer import ConfigurationResult, ModuleDefiner
from dm_diagnostics import Diagnostic, diag_from_error
from dm_fs import LocalFileSystem
from dm_logger import log_error, log_info
from dm_manifest import load_manifest
from dm_printer import format_descriptor, format_directive
from dm_third_party import ThirdPartyCatalog


def _load_file_lines(path: str, cache: Dict[str, List[str]]) -> List[str]:
    if path not in cache:
        text = Path(path).read_text(encoding="utf-8")
        cache[path] = text.splitlines()
    return cache[path]


def print_diagnostics(diagnostics: List[Diagnostic], context: ResolverContext) -> None:
    file_cache: Dict[str, List[str]] = {}

    for diag in diagnostics:
        print_diagnostic_with_snippet(diag, file_cache, context)


def print_diagnostic_with_snippet(diag: Diagnostic, file_cache: Dict[str, List[str]], context: ResolverContext) -> None:
    log_error(context, diag.format())

    if not diag.filename or diag.line is None:
        return

    try:
        lines = _load_file_lines(diag.filename, file_cache)
    except (OSError, UnicodeDecodeError):
        return

    line_idx = diag.line - 1
    if not (0 <= line_idx < len(lines)):
        return

    width = max(5, len(str(diag.line)))
    log_error(context, f"{diag.line:>{width}} | {lines[line_idx]}")


def build_resolver_context(args: argparse.Namespace) -> ResolverContext:
    """Build a ResolverContext from command-line arguments."""
    verbosity = getattr(args, 'verbosity', 0)
    if verbosity >= 3:
        log_level = LogLevel.DEBUG
    elif verbosity >= 1:
        log_level = LogLevel.INFO
    else:
        log_level = LogLevel.WARNING

    return ResolverContext(
        log_rich_format=getattr(args, 'log', False),
        log_level=log_level,
        strict_references=not getattr(args, 'permissive', False),
        allow_redefinition=getattr(args, 'allow_redefine', False),
        extra_link_libraries=list(getattr(args, 'extra_lib', None) or []),
        build_shared_libs=getattr(args, 'shared', False),
    )


def catalog_paths(args: argparse.Namespace) -> List[str]:
    """Catalog files from -c/--catalog, or else from $DM_CATALOG."""
    if args.catalog:
        return list(args.catalog)
    env = os.getenv("DM_CATALOG")
    if not env:
        return []
    separator = ';' if os.name == 'nt' else ':'
    return [p for p in env.split(separator) if p]


def _run_configuration(args: argparse.Namespace) -> Tuple[Optional[ConfigurationResult], ResolverContext, int]:
    """Load catalog and manifest, run the configuration pass, report diagnostics."""
    context = build_resolver_context(args)

    paths = catalog_paths(args)
    try:
        catalog = ThirdPartyCatalog.from_json_files(paths)
    except InvalidConfigurationError as e:
        print_diagnostics([diag_from_error("error", e, module_name=None, filename=e.filename, line=e.line)], context)
        return None, context, 1
    log_info(context, f"Third-party catalog: {', '.join(paths) or '<none>'} ({len(catalog.names())} name(s))")

    fs = LocalFileSystem()
    try:
        declarations = load_manifest(args.manifest, catalog=catalog, fs=fs)
    except (OSError, UnicodeDecodeError) as e:
        log_error(context, f"error: [DMC-0010] cannot read manifest {args.manifest}: {e}")
        return None, context, 1
    except InvalidConfigurationError as e:
        print_diagnostics([diag_from_error("error", e, module_name=None, filename=e.filename, line=e.line)], context)
        return None, context, 1
    log_info(context, f"Manifest {args.manifest}: {len(declarations)} declaration(s)")

    definer = ModuleDefiner(catalog=catalog, fs=fs, backend=RecordingBackend(), context=context)
    result = definer.configure(declarations)
    print_diagnostics(result.diagnostics, context)
    return result, context, 1 if result.has_errors() else 0


def cmd_check(args: argparse.Namespace) -> int:
    _, _, exit_code = _run_configuration(args)
    return exit_code


def cmd_resolve(args: argparse.Namespace) -> int:
    """
    Print resolved descriptors.

    By default prints every defined module; with --module only the named ones.
    """
    result, context, exit_code = _run_configuration(args)
    if result is None:
        return exit_code

    names = args.module or result.registry.names()
    for name in names:
        if name not in result.registry:
            log_error(context, f"error: [DMC-0020] module '{name}' is not defined")
            exit_code = 1
            continue
        print(format_descriptor(result.registry.get(name)))
        print()
    return exit_code


def cmd_targets(args: argparse.Namespace) -> int:
    """Print the artifact directives of every non-header module."""
    result, _, exit_code = _run_configuration(args)
    if result is None:
        return exit_code

    for directive in result.directives:
        print(format_directive(directive))
        print()
    return exit_code


def _add_manifest_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("manifest", help="Module manifest file")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="dmc", description="Module dependency resolver")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    parser.add_argument("-v", "--verbose",
                        action='count',
                        default=0,
                        dest='verbosity',
                        help="Increase verbosity: -v=INFO, -vvv=DEBUG")
    parser.add_argument("-l", "--log",
                        action='store_true',
                        default=False,
                        help="Enable rich log formatting (timestamps, levels)")
    parser.add_argument(
        "-c", "--catalog",
        action="append",
        default=[],
        help="Third-party catalog JSON file (can be passed multiple times; default: $DM_CATALOG as colon-separated paths)",
    )
    parser.add_argument(
        "--permissive",
        action="store_true",
        help="Warn about unknown references instead of failing",
    )
    parser.add_argument(
        "--allow-redefine",
        action="store_true",
        help="Let a later definition of a module replace an earlier one",
    )
    parser.add_argument(
        "--extra-lib",
        action="append",
        default=[],
        help="Library appended to every target's link line (can be passed multiple times)",
    )
    parser.add_argument(
        "--shared",
        action="store_true",
        help="Request libraries as shared objects",
    )

    p_check = subparsers.add_parser("check", help="Resolve all modules and report errors")
    _add_manifest_arg(p_check)
    p_check.set_defaults(func=cmd_check)

    p_resolve = subparsers.add_parser("resolve", help="Print resolved module descriptors", aliases=["descriptors"])
    p_resolve.add_argument("--module", "-m", action="append", default=[],
                           help="Only print this module (can be passed multiple times)")
    _add_manifest_arg(p_resolve)
    p_resolve.set_defaults(func=cmd_resolve)

    p_targets = subparsers.add_parser("targets", help="Print artifact directives", aliases=["directives"])
    _add_manifest_arg(p_targets)
    p_targets.set_defaults(func=cmd_targets)

    args = parser.parse_args(argv)

    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
