"""Set the vcpkg template version in CMakeLists.txt and vcpkg.json from the latest upstream release.

Both new file contents are computed before anything is written, and both files are staged
to temp siblings before either is renamed into place. A crash between the two renames can
still leave the files at different versions; rerunning repairs that.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from pathlib import Path
from typing import Any

from release_tooling.config import resolve_version_sync
from release_tooling.helpers import normalize_tag, write_files_staged
from release_tooling.version_sync.github import GitHubClient, ReleaseSource

log = logging.getLogger(__name__)

CMAKE_VERSION_RE = re.compile(r"(set\(VCPKG_FMT_TEMPLATE_VERSION\s+)[^\s)]+(\))")


class VersionSyncError(ValueError):
    """A version file does not have the expected shape."""


def patch_cmake_version(text: str, version: str) -> str:
    """Replace the value of set(VCPKG_FMT_TEMPLATE_VERSION ...) only; everything else untouched."""
    new_text, n = CMAKE_VERSION_RE.subn(lambda m: m.group(1) + version + m.group(2), text, count=1)
    if n == 0:
        msg = "No set(VCPKG_FMT_TEMPLATE_VERSION ...) line found"
        raise VersionSyncError(msg)
    return new_text


def patch_manifest_version(text: str, version: str) -> str:
    """Set top-level "version" and re-serialize with 2-space indent, key order kept."""
    data = json.loads(text)
    if not isinstance(data, dict):
        msg = "Manifest must be a JSON object"
        raise VersionSyncError(msg)
    data["version"] = version
    return json.dumps(data, indent=2, ensure_ascii=False)


def update_version_files(
    client: ReleaseSource,
    project_root: Path,
    settings: dict[str, Any] | None = None,
) -> str:
    """Fetch the latest release tag and write it into both version files. Returns the version."""
    cfg = resolve_version_sync(settings)
    release = client.get_latest_release(cfg["owner"], cfg["repo"])
    version = normalize_tag(release["tag_name"])
    log.debug("latest %s/%s release: %s", cfg["owner"], cfg["repo"], version)

    cmake_path = project_root / cfg["cmake_file"]
    manifest_path = project_root / cfg["manifest_file"]
    try:
        cmake_text = patch_cmake_version(cmake_path.read_text(encoding="utf-8"), version)
    except VersionSyncError as e:
        msg = f"{cmake_path}: {e}"
        raise VersionSyncError(msg) from e
    try:
        manifest_text = patch_manifest_version(manifest_path.read_text(encoding="utf-8"), version)
    except ValueError as e:
        msg = f"{manifest_path}: {e}"
        raise VersionSyncError(msg) from e

    for p in write_files_staged({cmake_path: cmake_text, manifest_path: manifest_text}):
        log.debug("wrote %s", p)
    return version


def run(project_root: Path, client: ReleaseSource | None = None) -> int:
    """Update CMakeLists.txt and vcpkg.json under project_root. Returns 0 or 1."""
    if client is None:
        client = GitHubClient.from_env()
    try:
        update_version_files(client, project_root)
    except (OSError, ValueError, KeyError) as e:
        print(f"Failed to update versions: {e}", file=sys.stderr)
        return 1
    print("VCPKG_FMT_TEMPLATE_VERSION and vcpkg.json updated")
    return 0
