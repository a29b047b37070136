"""`release-tooling changeset` subcommands: summary."""

from __future__ import annotations

import sys
from pathlib import Path

from release_tooling.changesets import ReleasePlanError, get_changeset_entries, render_changelog
from release_tooling.cli.parse_common import UsageError, existing_dir, package_names, parse_options


def run_changeset_argv(argv: list[str] | None = None) -> None:
    """Dispatch release-tooling changeset <subcommand>. argv defaults to sys.argv[2:]."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    if not argv:
        print("release-tooling changeset: missing subcommand (summary)", file=sys.stderr)
        sys.exit(1)
    cmd = argv[0]

    if cmd == "summary":
        try:
            opts = parse_options(
                argv[1:],
                {"--cwd": existing_dir, "--since": None, "--exclude": package_names},
            )
        except UsageError as e:
            print(f"release-tooling changeset summary: {e}", file=sys.stderr)
            sys.exit(1)
        try:
            entries = get_changeset_entries(
                opts.get("cwd", Path.cwd()),
                since_ref=opts.get("since"),
                exclude=opts.get("exclude"),
            )
        except (OSError, ReleasePlanError) as e:
            print(f"Failed to collect changesets: {e}", file=sys.stderr)
            sys.exit(1)
        print(render_changelog(entries))
        sys.exit(0)

    print(f"Error: Unknown changeset subcommand: {cmd}", file=sys.stderr)
    sys.exit(1)
