"""Pytest fixtures for release tooling tests."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from release_tooling.config import SELF_PACKAGE as SELF


@pytest.fixture
def changeset_workspace(tmp_path: Path) -> Path:
    """Single-package changesets workspace: package.json (self-package 1.2.3) and empty .changeset/."""
    (tmp_path / "package.json").write_text(json.dumps({"name": SELF, "version": "1.2.3"}))
    (tmp_path / ".changeset").mkdir()
    (tmp_path / ".changeset" / "README.md").write_text("# Changesets\n")
    return tmp_path


@pytest.fixture
def write_changeset(changeset_workspace: Path) -> Callable[..., Path]:
    """Write .changeset/<id>.md with front matter from releases and the given summary."""

    def _write(changeset_id: str, releases: dict[str, str], summary: str) -> Path:
        front = "".join(f'"{name}": {bump}\n' for name, bump in releases.items())
        p = changeset_workspace / ".changeset" / f"{changeset_id}.md"
        p.write_text(f"---\n{front}---\n\n{summary}\n")
        return p

    return _write
