"""Main CLI entry point for release tooling."""

import sys

from release_tooling.cli import changeset_cmd, version_cmd


def _usage() -> None:
    print("Usage: release-tooling <command> [args...]", file=sys.stderr)
    print("Commands:", file=sys.stderr)
    print(
        "  changeset summary [--cwd DIR] [--since REF] [--exclude a,b]"
        "  - Print pending changesets as a changelog section",
        file=sys.stderr,
    )
    print(
        "  version sync [--project-root DIR]"
        "  - Set CMakeLists.txt and vcpkg.json to the latest upstream release",
        file=sys.stderr,
    )


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        _usage()
        sys.exit(1)

    command = sys.argv[1]

    if command == "changeset":
        changeset_cmd.run_changeset_argv()
    elif command == "version":
        version_cmd.run_version_argv()
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        _usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
