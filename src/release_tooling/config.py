"""Defaults for release tooling (self-package, upstream repo, version file names)."""

from __future__ import annotations

import os
from typing import Any

# Package always reported on by the changeset summary, even without changesets.
SELF_PACKAGE = "storybook-addon-data-theme-switcher"

CHANGESET_DIR = ".changeset"

DEFAULT_VERSION_SYNC: dict[str, str] = {
    "owner": "paulbuechner",
    "repo": "occutils",
    "cmake_file": "CMakeLists.txt",
    "manifest_file": "vcpkg.json",
}


def resolve_version_sync(overrides: dict[str, Any] | None = None) -> dict[str, str]:
    """Return version sync settings with defaults filled. File paths relative to project_root."""
    out = dict(DEFAULT_VERSION_SYNC)
    if overrides:
        out.update({k: str(v) for k, v in overrides.items() if k in out and v is not None})
    return out


def github_token() -> str | None:
    """Token for the GitHub API from GH_TOKEN or GITHUB_TOKEN; None when neither is set."""
    return os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or None
