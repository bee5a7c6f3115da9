"""Tests for the command-line entry point (``main``)."""

from __future__ import annotations

import pytest

from main import build_parser, main


class TestInvalidInput:

    @pytest.mark.parametrize(
        "argv, field",
        [
            (["add", "Teff", "--stock", "-1", "--reorder-level", "5"], "current_stock"),
            (["add", "   ", "--stock", "3", "--reorder-level", "5"], "name"),
        ],
    )
    async def test_add_reports_validation_errors(
        self, settings, capsys: pytest.CaptureFixture[str], argv: list[str], field: str
    ) -> None:
        exit_code = await main(build_parser().parse_args(argv))

        assert exit_code == 1
        out = capsys.readouterr().out
        assert f"Invalid {field}" in out
        assert "Traceback" not in out

    async def test_valid_add_succeeds(
        self, settings, capsys: pytest.CaptureFixture[str]
    ) -> None:
        argv = ["add", "Teff", "--stock", "3", "--reorder-level", "5"]

        assert await main(build_parser().parse_args(argv)) == 0
        assert "Added" in capsys.readouterr().out
