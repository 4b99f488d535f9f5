"""Tests for the console status sink."""

import io

from rich.console import Console

from cfgowatch.status import ConsoleStatusSink


def _sink():
    buffer = io.StringIO()
    return ConsoleStatusSink(Console(file=buffer, force_terminal=False, width=200)), buffer


def test_info_message_printed():
    sink, buffer = _sink()
    sink.info("Generated settings.go")
    assert buffer.getvalue().strip() == "Generated settings.go"


def test_error_text_is_not_treated_as_markup():
    sink, buffer = _sink()
    sink.error("cfgo failed: unexpected [bold] at line 3")
    assert buffer.getvalue().strip() == "cfgo failed: unexpected [bold] at line 3"
