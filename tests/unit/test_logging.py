"""Unit tests for log routing."""

from __future__ import annotations

import logging

from infranodus_mcp.utils.logging import get_logger, setup_logging


def test_logs_go_to_stderr_and_never_stdout(capsys):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("INFO", "json")
        get_logger("infranodus_mcp.logging_check").info("stdout_stays_clean", tool="search")
        logging.getLogger("mcp").warning("sdk message")
        captured = capsys.readouterr()
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    assert captured.out == ""
    assert "stdout_stays_clean" in captured.err
    assert "sdk message" in captured.err
