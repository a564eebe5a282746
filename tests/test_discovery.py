"""Tests for manifest discovery."""

from __future__ import annotations

import os

import pytest

from conftest import write_manifest
from pkg_to_csv.discovery import locate_manifests
from pkg_to_csv.errors import NotFoundError, ParseError


@pytest.fixture
def monorepo(tmp_path):
    write_manifest(tmp_path, {"name": "root", "dependencies": {"lodash": "^4.17.21"}})
    write_manifest(tmp_path / "packages" / "api", {"name": "api"})
    write_manifest(tmp_path / "packages" / "web", {"dependencies": {"react": "^18.0.0"}})
    write_manifest(tmp_path / "node_modules" / "lodash", {"name": "lodash"})
    write_manifest(tmp_path / ".cache" / "tool", {"name": "hidden"})
    return tmp_path


class TestLocateManifests:
    def test_single_file(self, monorepo):
        records = locate_manifests(monorepo / "package.json")
        assert len(records) == 1
        assert records[0].project_name == "root"
        assert records[0].file_path == monorepo / "package.json"

    def test_relative_input_resolved_against_cwd(self, monorepo):
        records = locate_manifests("packages/api", cwd=monorepo)
        assert [r.project_name for r in records] == ["api"]

    def test_directory_non_recursive(self, monorepo):
        records = locate_manifests(monorepo)
        assert [r.project_name for r in records] == ["root"]

    def test_recursive_depth_first(self, monorepo):
        records = locate_manifests(monorepo, recursive=True)
        assert [r.project_name for r in records] == ["root", "api", "web"]

    def test_recursive_skips_hidden_and_node_modules(self, monorepo):
        names = {r.project_name for r in locate_manifests(monorepo, recursive=True)}
        assert "lodash" not in names
        assert "hidden" not in names

    def test_name_falls_back_to_directory(self, monorepo):
        records = locate_manifests(monorepo / "packages" / "web")
        assert records[0].project_name == "web"

    def test_directory_without_manifest(self, tmp_path):
        assert locate_manifests(tmp_path) == []

    def test_other_file_yields_nothing(self, tmp_path):
        other = tmp_path / "README.md"
        other.write_text("hello", encoding="utf-8")
        assert locate_manifests(other) == []

    def test_missing_path(self, tmp_path):
        with pytest.raises(NotFoundError) as excinfo:
            locate_manifests(tmp_path / "nope")
        assert "nope" in str(excinfo.value)

    def test_parse_error_names_path(self, monorepo):
        broken = write_manifest(monorepo / "packages" / "broken", "{")
        with pytest.raises(ParseError) as excinfo:
            locate_manifests(monorepo, recursive=True)
        assert excinfo.value.path == broken

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_cycle_terminates(self, tmp_path):
        write_manifest(tmp_path / "a", {"name": "a"})
        try:
            (tmp_path / "a" / "loop").symlink_to(tmp_path, target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlinks here")
        write_manifest(tmp_path, {"name": "root"})

        records = locate_manifests(tmp_path, recursive=True)
        assert [r.project_name for r in records] == ["root", "a"]
