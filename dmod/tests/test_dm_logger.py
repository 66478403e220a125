#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dm_context import LogLevel, ResolverContext
from dm_logger import log_debug, log_error, log_info, log_stage, log_warning


def test_messages_above_the_context_level_are_dropped(capsys):
    context = ResolverContext(log_level=LogLevel.WARNING)

    log_error(context, "broken")
    log_warning(context, "careful")
    log_info(context, "chatty")
    log_debug(context, "noisy")

    err = capsys.readouterr().err
    assert "broken" in err
    assert "careful" in err
    assert "chatty" not in err
    assert "noisy" not in err


def test_rich_format_prefixes_the_level(capsys):
    context = ResolverContext(log_level=LogLevel.INFO, log_rich_format=True)

    log_info(context, "creating target 'app'")

    assert "[INFO] creating target 'app'" in capsys.readouterr().err


def test_silent_context_logs_nothing(capsys):
    context = ResolverContext(log_level=LogLevel.SILENT)

    log_error(context, "broken")
    log_stage(context, "Defining", "app")

    assert capsys.readouterr().err == ""


def test_stage_names_the_module(capsys):
    context = ResolverContext(log_level=LogLevel.INFO)

    log_stage(context, "Defining", "app")
    log_stage(context, "Loading manifest")

    err = capsys.readouterr().err
    assert "Defining module 'app'" in err
    assert "Loading manifest..." in err
