"""Tests that -h is accepted as a help flag on all CLI commands."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from funcapp_gen.cli.app import app

runner = CliRunner()


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["check"],
        ["build"],
        ["unpack"],
        ["codes"],
    ],
    ids=["root", "check", "build", "unpack", "codes"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output
