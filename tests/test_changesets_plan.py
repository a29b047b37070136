"""Tests for release_tooling.changesets.plan (reading .changeset/ and assembling the release plan)."""

import json
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from release_tooling.changesets import (
    Changeset,
    ReleasePlanError,
    assemble_release_plan,
    find_packages,
    get_release_plan,
    parse_changeset,
    read_changesets,
    read_config,
)

from release_tooling.config import SELF_PACKAGE as SELF

plan_module = sys.modules["release_tooling.changesets.plan"]


class TestParseChangeset:
    def test_front_matter_and_summary(self) -> None:
        cs = parse_changeset("x", '---\n"pkg-a": minor\npkg-b: patch\n---\n\nAdd thing\n')
        assert cs.id == "x"
        assert cs.summary == "Add thing"
        assert cs.releases == (("pkg-a", "minor"), ("pkg-b", "patch"))

    def test_multiline_summary_kept(self) -> None:
        cs = parse_changeset("x", "---\npkg: major\n---\n\nBreaking\n\n- detail one\n")
        assert cs.summary == "Breaking\n\n- detail one"

    def test_empty_front_matter(self) -> None:
        cs = parse_changeset("x", "---\n---\n\nNothing released\n")
        assert cs.releases == ()
        assert cs.summary == "Nothing released"

    def test_missing_front_matter_raises(self) -> None:
        with pytest.raises(ReleasePlanError, match="missing front matter"):
            parse_changeset("x", "Just text\n")

    def test_unknown_bump_raises(self) -> None:
        with pytest.raises(ReleasePlanError, match="Unknown bump"):
            parse_changeset("x", "---\npkg: huge\n---\nText\n")

    def test_empty_bump_raises(self) -> None:
        with pytest.raises(ReleasePlanError, match="no bump type for package 'pkg'"):
            parse_changeset("x", '---\n"pkg":\n---\nText\n')

    def test_non_string_bump_raises(self) -> None:
        with pytest.raises(ReleasePlanError, match=r"no bump type for package 'pkg' \(got 1\)"):
            parse_changeset("x", "---\npkg: 1\n---\nText\n")

    def test_non_mapping_front_matter_raises(self) -> None:
        with pytest.raises(ReleasePlanError, match="must map"):
            parse_changeset("x", "---\n- pkg\n---\nText\n")


class TestReadChangesets:
    def test_sorted_and_readme_skipped(self, changeset_workspace: Path, write_changeset) -> None:
        write_changeset("zebra", {SELF: "patch"}, "Z")
        write_changeset("apple", {SELF: "minor"}, "A")
        assert [cs.id for cs in read_changesets(changeset_workspace)] == ["apple", "zebra"]

    def test_missing_dir_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ReleasePlanError, match="not found"):
            read_changesets(tmp_path)

    def test_since_ref_filters_to_changed_files(
        self, changeset_workspace: Path, write_changeset
    ) -> None:
        write_changeset("old-one", {SELF: "patch"}, "Old")
        write_changeset("new-one", {SELF: "minor"}, "New")
        outputs = {"merge-base": "abc123", "diff": ".changeset/new-one.md\n"}
        calls: list[list[str]] = []

        def fake_git(args, cwd):
            calls.append(list(args))
            return outputs[args[0]]

        with patch.object(plan_module, "run_git", side_effect=fake_git):
            result = read_changesets(changeset_workspace, since_ref="main")
        assert [cs.id for cs in result] == ["new-one"]
        assert calls[0] == ["merge-base", "main", "HEAD"]
        assert "abc123" in calls[1]
        assert calls[1][-2:] == ["--", ".changeset"]

    def test_since_ref_git_failure_raises(self, changeset_workspace: Path) -> None:
        err = subprocess.CalledProcessError(128, ["git"], stderr="fatal: bad revision 'nope'")
        with (
            patch.object(plan_module, "run_git", side_effect=err),
            pytest.raises(ReleasePlanError, match="bad revision"),
        ):
            read_changesets(changeset_workspace, since_ref="nope")


class TestReadConfigAndPackages:
    def test_config_defaults_when_missing(self, changeset_workspace: Path) -> None:
        assert read_config(changeset_workspace) == {"fixed": [], "ignore": []}

    def test_config_reads_fixed_and_ignore(self, changeset_workspace: Path) -> None:
        (changeset_workspace / ".changeset" / "config.json").write_text(
            json.dumps({"fixed": [["a", "b"]], "ignore": ["docs"], "access": "public"})
        )
        assert read_config(changeset_workspace) == {"fixed": [["a", "b"]], "ignore": ["docs"]}

    def test_find_packages_with_workspaces(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(
            json.dumps({"name": "root", "private": True, "workspaces": ["packages/*"]})
        )
        for name, version in (("a", "1.0.0"), ("b", "0.2.0")):
            d = tmp_path / "packages" / name
            d.mkdir(parents=True)
            (d / "package.json").write_text(json.dumps({"name": f"@s/{name}", "version": version}))
        (tmp_path / "packages" / "not-a-package").mkdir()
        assert find_packages(tmp_path) == {"root": "0.0.0", "@s/a": "1.0.0", "@s/b": "0.2.0"}

    def test_find_packages_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ReleasePlanError, match="package.json not found"):
            find_packages(tmp_path)


class TestAssembleReleasePlan:
    PACKAGES = {"a": "1.0.0", "b": "2.3.4", "c": "0.1.0"}

    def test_highest_bump_wins_and_order_of_first_mention(self) -> None:
        plan = assemble_release_plan(
            [
                Changeset("one", "x", (("b", "patch"),)),
                Changeset("two", "y", (("a", "patch"), ("b", "minor"))),
            ],
            self.PACKAGES,
        )
        assert [(r.name, r.type, r.new_version, r.changesets) for r in plan.releases] == [
            ("b", "minor", "2.4.0", ("one", "two")),
            ("a", "patch", "1.0.1", ("two",)),
        ]

    def test_fixed_group_adds_release_without_changesets(self) -> None:
        plan = assemble_release_plan(
            [Changeset("one", "x", (("a", "minor"),))],
            self.PACKAGES,
            {"fixed": [["a", "c"]]},
        )
        c = next(r for r in plan.releases if r.name == "c")
        assert (c.type, c.new_version, c.changesets) == ("minor", "1.1.0", ())

    def test_fixed_group_shares_highest_version_bumped(self) -> None:
        plan = assemble_release_plan(
            [Changeset("one", "x", (("c", "patch"),)), Changeset("two", "y", (("b", "minor"),))],
            self.PACKAGES,
            {"fixed": [["a", "b", "c"]]},
        )
        by_name = {r.name: r for r in plan.releases}
        assert {r.new_version for r in plan.releases} == {"2.4.0"}
        assert by_name["a"].old_version == "1.0.0"
        assert by_name["c"].changesets == ("one",)
        assert [r.name for r in plan.releases] == ["c", "b", "a"]

    def test_ignored_package_skipped(self) -> None:
        plan = assemble_release_plan(
            [Changeset("one", "x", (("a", "major"), ("c", "patch")))],
            self.PACKAGES,
            {"ignore": ["c"]},
        )
        assert [r.name for r in plan.releases] == ["a"]
        assert plan.releases[0].new_version == "2.0.0"

    def test_none_bump_keeps_version(self) -> None:
        plan = assemble_release_plan([Changeset("one", "x", (("a", "none"),))], self.PACKAGES)
        assert plan.releases[0].new_version == "1.0.0"

    def test_unknown_package_raises(self) -> None:
        with pytest.raises(ReleasePlanError, match="unknown package 'zzz'"):
            assemble_release_plan([Changeset("one", "x", (("zzz", "patch"),))], self.PACKAGES)


class TestGetReleasePlan:
    def test_end_to_end(self, changeset_workspace: Path, write_changeset) -> None:
        write_changeset("a-change", {SELF: "patch"}, "Fix colors")
        plan = get_release_plan(str(changeset_workspace))
        assert [cs.summary for cs in plan.changesets] == ["Fix colors"]
        assert plan.releases[0].name == SELF
        assert plan.releases[0].new_version == "1.2.4"
