"""Shared helpers for release_tooling (version strings, staged file writes, git).

Used by changesets and version_sync.
"""

from __future__ import annotations

import os
import re
import subprocess
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path

SEMVER_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-([\w.-]+))?$")

BUMP_TYPES = ("none", "patch", "minor", "major")

# --- Version ---


def normalize_tag(tag: str) -> str:
    """Strip a single leading 'v' from a release tag (v1.2.3 -> 1.2.3; 1.2.3 unchanged)."""
    return tag[1:] if tag.startswith("v") else tag


def bump_rank(bump: str) -> int:
    """Order of bump types: none < patch < minor < major. Raises ValueError on unknown bump."""
    try:
        return BUMP_TYPES.index(bump)
    except ValueError:
        msg = f"Unknown bump: {bump}. Use major, minor, patch, or none."
        raise ValueError(msg) from None


def version_key(version: str) -> tuple[int, int, int, int, str]:
    """Sort key for X.Y.Z[-pre]; a prerelease sorts below its release. Raises ValueError."""
    m = SEMVER_RE.match(normalize_tag(version))
    if not m:
        msg = f"Invalid version: {version}"
        raise ValueError(msg)
    prerel = m.group(4)
    return (int(m.group(1)), int(m.group(2)), int(m.group(3)), 0 if prerel else 1, prerel or "")


def next_version(old: str, bump: str) -> str:
    """Compute next version from X.Y.Z[-pre]. Prerelease suffix is dropped on any real bump."""
    m = SEMVER_RE.match(normalize_tag(old))
    if not m:
        msg = f"Invalid version: {old}"
        raise ValueError(msg)
    x, y, z = int(m.group(1)), int(m.group(2)), int(m.group(3))
    prerel = m.group(4)
    b = bump.lower()
    bump_rank(b)

    # A prerelease already sits below its release: 1.2.3-rc.1 + patch -> 1.2.3
    if b == "none":
        return normalize_tag(old)
    if b == "patch":
        if not prerel:
            z += 1
    elif b == "minor":
        if not (prerel and z == 0):
            y += 1
        z = 0
    else:
        if not (prerel and y == 0 and z == 0):
            x += 1
        y = z = 0
    return f"{x}.{y}.{z}"


# --- Files ---


def write_files_staged(contents: Mapping[Path, str]) -> list[Path]:
    """Write every file to a temp sibling first, then rename each into place.

    All new contents reach disk before any target is replaced, so a failed write leaves
    every target untouched. The renames themselves run one after another; a crash between
    them can still leave targets from different generations. Returns the written paths.
    """
    staged: list[tuple[Path, str]] = []
    try:
        for path, text in contents.items():
            if path.is_dir():
                msg = f"Cannot write file over directory: {path}"
                raise IsADirectoryError(msg)
            fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            staged.append((path, tmp))
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            # mkstemp creates 0600; keep the target's mode
            if path.exists():
                os.chmod(tmp, path.stat().st_mode & 0o7777)
    except OSError:
        for _path, tmp in staged:
            Path(tmp).unlink(missing_ok=True)
        raise

    written: list[Path] = []
    try:
        for path, tmp in staged:
            os.replace(tmp, path)
            written.append(path)
    except OSError:
        for _path, tmp in staged[len(written) :]:
            Path(tmp).unlink(missing_ok=True)
        raise
    return written


# --- Git ---


def run_git(args: Sequence[str], cwd: Path) -> str:
    """Run git with args in cwd and return stripped stdout. Raises CalledProcessError on failure."""
    r = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return r.stdout.strip()
