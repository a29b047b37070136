"""Option parsing shared by the changeset and version subcommands (--cwd, --since, --exclude, --project-root)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

Converter = Callable[[str], Any]


class UsageError(ValueError):
    """Command line arguments the subcommand does not accept."""


def option_key(flag: str) -> str:
    """--project-root -> project_root."""
    return flag.lstrip("-").replace("-", "_")


def parse_options(argv: list[str], flags: Mapping[str, Converter | None]) -> dict[str, Any]:
    """Parse `--flag value` and `--flag=value` for the given flags.

    Returns only the flags present, keyed by option_key. Converters run on the raw value
    (None keeps the string). Unknown arguments and a flag without a value raise UsageError.
    """
    parsed: dict[str, Any] = {}
    it = iter(argv)
    for arg in it:
        flag, sep, value = arg.partition("=")
        if flag not in flags:
            msg = f"unexpected argument: {arg}"
            raise UsageError(msg)
        if not sep:
            value = next(it, None)
            if value is None:
                msg = f"{flag} requires a value"
                raise UsageError(msg)
        convert = flags[flag]
        parsed[option_key(flag)] = convert(value) if convert else value
    return parsed


def existing_dir(s: str) -> Path:
    """Resolve --cwd / --project-root to an absolute directory. Raises UsageError if missing."""
    p = Path(s).resolve()
    if not p.is_dir():
        msg = f"not a directory: {s}"
        raise UsageError(msg)
    return p


def package_names(s: str) -> list[str]:
    """--exclude a,b -> ["a", "b"]; an empty value means exclude nothing."""
    return [part.strip() for part in s.split(",") if part.strip()]
