"""Render changeset entries as a markdown changelog section."""

from __future__ import annotations

from release_tooling.changesets.model import ChangesetEntries
from release_tooling.changesets.summary import get_current_date


def render_changelog(entries: ChangesetEntries, header: str | None = None) -> str:
    """Date header, then each release's display name followed by its bullet lines."""
    parts = [header if header is not None else get_current_date(), ""]
    for summary in entries.summary:
        parts.append(summary.display_name)
        parts.append("")
        lines = [cs.rstrip("\n") for cs in summary.changesets if cs]
        if lines:
            parts.extend(lines)
            parts.append("")
    return "\n".join(parts)
