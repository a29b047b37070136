"""Release plan from a changesets workspace (.changeset/*.md, .changeset/config.json, package.json).

Each changeset file has YAML front matter mapping package names to a bump type, followed by a
markdown summary:

    ---
    "storybook-addon-data-theme-switcher": minor
    ---

    Add a toolbar entry for the current theme.

With since_ref, only changeset files added or changed since the merge base of since_ref and
HEAD are read; otherwise every changeset in the directory is pending.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
from pathlib import Path
from typing import Any

import yaml

from release_tooling.changesets.model import Changeset, Release, ReleasePlan
from release_tooling.config import CHANGESET_DIR
from release_tooling.helpers import bump_rank, next_version, run_git, version_key

log = logging.getLogger(__name__)

_FRONT_MATTER = re.compile(r"\A\s*---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?(.*)\Z", re.DOTALL | re.MULTILINE)


class ReleasePlanError(ValueError):
    """Changeset workspace cannot be turned into a release plan."""


def parse_changeset(changeset_id: str, text: str) -> Changeset:
    """Parse one changeset file body. Raises ReleasePlanError on malformed front matter."""
    m = _FRONT_MATTER.match(text)
    if not m:
        msg = f"Changeset {changeset_id}: missing front matter"
        raise ReleasePlanError(msg)
    try:
        data = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        msg = f"Changeset {changeset_id}: invalid front matter: {e}"
        raise ReleasePlanError(msg) from e
    if not isinstance(data, dict):
        msg = f"Changeset {changeset_id}: front matter must map package names to bump types"
        raise ReleasePlanError(msg)

    releases: list[tuple[str, str]] = []
    for name, value in data.items():
        if not isinstance(value, str) or not value.strip():
            msg = f"Changeset {changeset_id}: no bump type for package {name!r} (got {value!r})"
            raise ReleasePlanError(msg)
        bump = value.strip().lower()
        try:
            bump_rank(bump)
        except ValueError as e:
            msg = f"Changeset {changeset_id}: {e}"
            raise ReleasePlanError(msg) from e
        releases.append((str(name), bump))
    return Changeset(id=changeset_id, summary=m.group(2).strip(), releases=tuple(releases))


def _changed_since(cwd: Path, since_ref: str) -> set[str]:
    """Changeset file names added or modified since the merge base of since_ref and HEAD."""
    try:
        base = run_git(["merge-base", since_ref, "HEAD"], cwd)
        out = run_git(
            ["diff", "--name-only", "--relative", "--diff-filter=d", base, "--", CHANGESET_DIR],
            cwd,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        err = getattr(e, "stderr", None) or str(e)
        msg = f"Failed to list changesets since {since_ref}: {err.strip()}"
        raise ReleasePlanError(msg) from e
    return {Path(line).name for line in out.splitlines() if line.strip()}


def read_changesets(cwd: Path, since_ref: str | None = None) -> list[Changeset]:
    """Read pending changesets from cwd/.changeset, sorted by id."""
    changeset_dir = cwd / CHANGESET_DIR
    if not changeset_dir.is_dir():
        msg = f"{changeset_dir} not found; is {cwd} a changesets workspace?"
        raise ReleasePlanError(msg)

    files = sorted(p for p in changeset_dir.glob("*.md") if p.name.lower() != "readme.md")
    if since_ref is not None:
        changed = _changed_since(cwd, since_ref)
        files = [p for p in files if p.name in changed]

    out: list[Changeset] = []
    for p in files:
        log.debug("reading changeset %s", p)
        out.append(parse_changeset(p.stem, p.read_text(encoding="utf-8")))
    return out


def read_config(cwd: Path) -> dict[str, Any]:
    """Return .changeset/config.json with fixed and ignore filled; missing file means defaults."""
    config: dict[str, Any] = {"fixed": [], "ignore": []}
    p = cwd / CHANGESET_DIR / "config.json"
    if p.is_file():
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            msg = f"Invalid JSON in {p}: {e}"
            raise ReleasePlanError(msg) from e
        config.update({k: data[k] for k in ("fixed", "ignore") if k in data})
    return config


def _read_package(p: Path) -> tuple[str, str] | None:
    data = json.loads(p.read_text(encoding="utf-8"))
    name = data.get("name")
    if not name:
        return None
    return name, data.get("version", "0.0.0")


def find_packages(cwd: Path) -> dict[str, str]:
    """Package name -> version for cwd/package.json and its workspaces globs."""
    root = cwd / "package.json"
    if not root.is_file():
        msg = f"{root} not found"
        raise ReleasePlanError(msg)
    try:
        root_data = json.loads(root.read_text(encoding="utf-8"))
        packages: dict[str, str] = {}
        found = _read_package(root)
        if found:
            packages[found[0]] = found[1]

        workspaces = root_data.get("workspaces") or []
        if isinstance(workspaces, dict):
            workspaces = workspaces.get("packages", [])
        for pattern in workspaces:
            for d in sorted(cwd.glob(pattern)):
                manifest = d / "package.json"
                if manifest.is_file():
                    found = _read_package(manifest)
                    if found:
                        packages[found[0]] = found[1]
    except json.JSONDecodeError as e:
        msg = f"Invalid package.json under {cwd}: {e}"
        raise ReleasePlanError(msg) from e
    return packages


def assemble_release_plan(
    changesets: list[Changeset],
    packages: dict[str, str],
    config: dict[str, Any] | None = None,
) -> ReleasePlan:
    """Combine changesets into one release per package; highest bump wins.

    Releases are ordered by first mention. Members of a fixed group share one new version:
    the group's highest current version with the group's highest bump applied. Members
    without changesets of their own get a release with none listed.
    """
    config = config or {}
    ignore = set(config.get("ignore", []))
    pending: dict[str, dict[str, Any]] = {}

    for cs in changesets:
        for name, bump in cs.releases:
            if name in ignore:
                continue
            if name not in packages:
                msg = f"Changeset {cs.id} references unknown package {name!r}"
                raise ReleasePlanError(msg)
            entry = pending.setdefault(name, {"type": "none", "changesets": []})
            if bump_rank(bump) > bump_rank(entry["type"]):
                entry["type"] = bump
            entry["changesets"].append(cs.id)

    for group in config.get("fixed", []):
        members = [n for n in group if n in packages and n not in ignore]
        bumps = [pending[n]["type"] for n in members if n in pending]
        if not bumps:
            continue
        top = max(bumps, key=bump_rank)
        if top == "none":
            continue
        try:
            highest = max((packages[n] for n in members), key=version_key)
            shared = next_version(highest, top)
        except ValueError as e:
            msg = f"Fixed group {members}: {e}"
            raise ReleasePlanError(msg) from e
        for n in members:
            entry = pending.setdefault(n, {"type": "none", "changesets": []})
            entry["type"] = top
            entry["new_version"] = shared

    releases: list[Release] = []
    for name, entry in pending.items():
        old = packages[name]
        try:
            new = entry.get("new_version") or next_version(old, entry["type"])
        except ValueError as e:
            msg = f"Package {name}: {e}"
            raise ReleasePlanError(msg) from e
        releases.append(
            Release(
                name=name,
                type=entry["type"],
                old_version=old,
                new_version=new,
                changesets=tuple(entry["changesets"]),
            )
        )
    return ReleasePlan(changesets=tuple(changesets), releases=tuple(releases))


def get_release_plan(cwd: str | Path, since_ref: str | None = None) -> ReleasePlan:
    """Pending changesets and the resulting release per affected package."""
    cwd = Path(cwd)
    return assemble_release_plan(
        read_changesets(cwd, since_ref),
        find_packages(cwd),
        read_config(cwd),
    )
