"""Version sync: latest upstream release tag -> CMakeLists.txt and vcpkg.json."""

from .github import GitHubClient, ReleaseSource
from .sync import (
    VersionSyncError,
    patch_cmake_version,
    patch_manifest_version,
    update_version_files,
)
from .sync import run as run_version_sync

__all__ = [
    "GitHubClient",
    "ReleaseSource",
    "VersionSyncError",
    "patch_cmake_version",
    "patch_manifest_version",
    "run_version_sync",
    "update_version_files",
]
