"""Collect pending releases and format their changesets for the changelog."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from pathlib import Path

from release_tooling.changesets.model import (
    Changeset,
    ChangesetEntries,
    Release,
    ReleasePlan,
    ReleaseSummary,
)
from release_tooling.changesets.plan import get_release_plan
from release_tooling.config import SELF_PACKAGE

ReleasePlanner = Callable[[Path, str | None], ReleasePlan]

_TRAILING_COMMA = re.compile(r",\s*$")


def get_current_date(today: date | None = None) -> str:
    """Changelog section header for today (or the given date): ## DD-MM-YYYY."""
    d = today or date.today()
    return f"## {d.day:02d}-{d.month:02d}-{d.year:04d}"


def get_changeset_entries(
    cwd: str | Path,
    since_ref: str | None = None,
    exclude: Iterable[str] | None = None,
    planner: ReleasePlanner = get_release_plan,
) -> ChangesetEntries:
    """Releases with changesets (plus the self-package), self-package first, with summaries.

    exclude defaults to the self-package. Planner errors propagate unchanged.
    """
    excluded = frozenset(exclude) if exclude is not None else frozenset({SELF_PACKAGE})
    plan = planner(Path(cwd), since_ref)

    releases = [
        r
        for r in plan.releases
        if (r.name == SELF_PACKAGE or len(r.changesets) > 0) and r.name not in excluded
    ]
    # sorted() is stable, so the rest keep planner order
    releases = sorted(releases, key=lambda r: r.name != SELF_PACKAGE)

    return ChangesetEntries(
        releases=releases,
        summary=[get_release_summary(plan.changesets, r) for r in releases],
    )


def _format_summary(summary: str | None) -> str | None:
    if not summary or summary.strip().startswith("-"):
        return summary
    return f"- {summary} \n"


def get_release_summary(changesets: Sequence[Changeset], release: Release) -> ReleaseSummary:
    """Bullet-format the release's changeset summaries; unknown ids become None."""
    by_id = {cs.id: cs.summary for cs in changesets}
    label = _TRAILING_COMMA.sub("", f"{release.name}@{release.new_version}")
    return ReleaseSummary(
        name=release.name,
        type=release.type,
        old_version=release.old_version,
        new_version=release.new_version,
        changesets=tuple(_format_summary(by_id.get(cs_id)) for cs_id in release.changesets),
        display_name=f"`{label}`",
    )
