"""`release-tooling version` subcommands: sync."""

from __future__ import annotations

import sys
from pathlib import Path

from release_tooling.cli.parse_common import UsageError, existing_dir, parse_options
from release_tooling.version_sync import run_version_sync


def run_version_argv(argv: list[str] | None = None) -> None:
    """Dispatch release-tooling version <subcommand>. argv defaults to sys.argv[2:]."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    if not argv:
        print("release-tooling version: missing subcommand (sync)", file=sys.stderr)
        sys.exit(1)
    cmd = argv[0]

    if cmd == "sync":
        try:
            opts = parse_options(argv[1:], {"--project-root": existing_dir})
        except UsageError as e:
            print(f"release-tooling version sync: {e}", file=sys.stderr)
            sys.exit(1)
        sys.exit(run_version_sync(opts.get("project_root", Path.cwd())))

    print(f"Error: Unknown version subcommand: {cmd}", file=sys.stderr)
    sys.exit(1)
