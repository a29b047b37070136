"""Changeset, release and summary records."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Changeset:
    id: str
    summary: str
    releases: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Release:
    name: str
    type: str
    old_version: str
    new_version: str
    changesets: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReleasePlan:
    changesets: tuple[Changeset, ...] = ()
    releases: tuple[Release, ...] = ()


@dataclass(frozen=True)
class ReleaseSummary:
    """A release with its changeset summaries as bullet lines and a display label.

    `changesets` is index-aligned with the release's changeset ids; unknown ids are None.
    """

    name: str
    type: str
    old_version: str
    new_version: str
    changesets: tuple[str | None, ...]
    display_name: str


@dataclass(frozen=True)
class ChangesetEntries:
    releases: list[Release] = field(default_factory=list)
    summary: list[ReleaseSummary] = field(default_factory=list)
