"""Unit tests for console helpers (stackseed.utils)."""

from __future__ import annotations

import pytest

from stackseed.utils import (
    BRANCH_COLORS,
    console,
    format_duration,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
)


class TestFormatDuration:
    @pytest.mark.unit
    def test_seconds_only(self):
        assert format_duration(3.7) == "3.7s"

    @pytest.mark.unit
    def test_minutes(self):
        assert format_duration(65.2) == "1m 5s"

    @pytest.mark.unit
    def test_hours(self):
        assert format_duration(3661.0) == "1h 1m 1s"

    @pytest.mark.unit
    def test_negative(self):
        assert format_duration(-1) == "0.0s"


class TestRichOutput:
    @pytest.mark.unit
    def test_branch_colors_cover_all_branches(self):
        assert set(BRANCH_COLORS) == {"root", "backend", "frontend"}

    @pytest.mark.unit
    def test_step_header(self):
        with console.capture() as capture:
            print_step_header("backend", "Install dev packages")
        assert "Install dev packages" in capture.get()

    @pytest.mark.unit
    def test_summary_table(self):
        with console.capture() as capture:
            print_summary_table({"Files written": "3"}, title="Scaffold Summary")
        output = capture.get()
        assert "Scaffold Summary" in output
        assert "Files written" in output

    @pytest.mark.unit
    def test_messages_keep_square_brackets(self):
        with console.capture() as capture:
            print_error("npm ERR! [ERESOLVE] could not resolve")
            print_warning("[warn] deprecated")
            print_success("[ok] done")
        output = capture.get()
        assert "[ERESOLVE]" in output
        assert "[warn]" in output
        assert "[ok]" in output
