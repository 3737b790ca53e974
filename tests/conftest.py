"""Shared pytest fixtures for the combinator test suite."""

from __future__ import annotations

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_config(tmp_path):
    """Write a combinator.toml into a temp dir and return its path."""

    def _write(text: str):
        path = tmp_path / "combinator.toml"
        path.write_text(text)
        return path

    return _write
