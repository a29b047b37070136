"""CLI entry points: release-tooling changeset | version."""
