"""Changesets: release plan from .changeset/, per-release summaries, changelog section."""

from .changelog import render_changelog
from .model import Changeset, ChangesetEntries, Release, ReleasePlan, ReleaseSummary
from .plan import (
    ReleasePlanError,
    assemble_release_plan,
    find_packages,
    get_release_plan,
    parse_changeset,
    read_changesets,
    read_config,
)
from .summary import get_changeset_entries, get_current_date, get_release_summary

__all__ = [
    "Changeset",
    "ChangesetEntries",
    "Release",
    "ReleasePlan",
    "ReleasePlanError",
    "ReleaseSummary",
    "assemble_release_plan",
    "find_packages",
    "get_changeset_entries",
    "get_current_date",
    "get_release_plan",
    "get_release_summary",
    "parse_changeset",
    "read_changesets",
    "read_config",
    "render_changelog",
]
