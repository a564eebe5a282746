"""Tests for dependency extraction and manifest loading."""

from __future__ import annotations

import pytest

from conftest import write_manifest
from pkg_to_csv.config import Scope
from pkg_to_csv.errors import ParseError
from pkg_to_csv.parsers.package_json import load, parse

MANIFEST = {
    "name": "app",
    "dependencies": {"lodash": "^4.17.21", "express": "^4.18.0"},
    "devDependencies": {"jest": "^29.0.0", "eslint": "^8.0.0", "typescript": "~5.2.0"},
    "peerDependencies": {"react": ">=18"},
    "optionalDependencies": {"fsevents": "*"},
}


class TestParse:
    def test_both_yields_production_then_development(self):
        deps = parse(MANIFEST)
        assert [d.name for d in deps] == ["lodash", "express", "jest", "eslint", "typescript"]
        assert [d.scope for d in deps] == ["dependencies"] * 2 + ["devDependencies"] * 3

    @pytest.mark.parametrize(
        ("scope", "expected"),
        [(Scope.BOTH, 5), (Scope.PRODUCTION, 2), (Scope.DEVELOPMENT, 3)],
    )
    def test_scope_counts(self, scope, expected):
        assert len(parse(MANIFEST, scope)) == expected

    def test_production_only(self):
        deps = parse(MANIFEST, Scope.PRODUCTION)
        assert {d.scope for d in deps} == {"dependencies"}

    def test_development_only(self):
        deps = parse(MANIFEST, Scope.DEVELOPMENT)
        assert [d.name for d in deps] == ["jest", "eslint", "typescript"]
        assert all(d.is_development for d in deps)

    def test_version_range_kept_verbatim(self):
        deps = parse({"dependencies": {"local": "file:../local", "git": "github:a/b#v1"}})
        assert [d.version_range for d in deps] == ["file:../local", "github:a/b#v1"]

    def test_peer_and_optional_ignored(self):
        names = {d.name for d in parse(MANIFEST)}
        assert "react" not in names
        assert "fsevents" not in names

    def test_no_sections(self):
        assert parse({"name": "empty"}) == []

    def test_missing_requested_section(self):
        assert parse({"dependencies": {"a": "1.0.0"}}, Scope.DEVELOPMENT) == []


class TestLoad:
    def test_load_valid(self, tmp_path):
        path = write_manifest(tmp_path, MANIFEST)
        assert load(path)["name"] == "app"

    def test_invalid_json(self, tmp_path):
        path = write_manifest(tmp_path, "{ not json")
        with pytest.raises(ParseError) as excinfo:
            load(path)
        assert excinfo.value.path == path
        assert str(path) in str(excinfo.value)

    def test_not_an_object(self, tmp_path):
        path = write_manifest(tmp_path, "[1, 2, 3]")
        with pytest.raises(ParseError):
            load(path)

    def test_dependencies_must_map_to_strings(self, tmp_path):
        path = write_manifest(tmp_path, {"dependencies": {"lodash": 4}})
        with pytest.raises(ParseError) as excinfo:
            load(path)
        assert "dependencies/lodash" in excinfo.value.reason

    def test_dependencies_must_be_object(self, tmp_path):
        path = write_manifest(tmp_path, {"devDependencies": ["jest"]})
        with pytest.raises(ParseError):
            load(path)

    def test_null_sections_read_as_empty(self, tmp_path):
        path = write_manifest(
            tmp_path,
            {"name": "app", "dependencies": None, "devDependencies": {"jest": "^29.0.0"}},
        )
        content = load(path)
        assert [d.name for d in parse(content)] == ["jest"]
        assert parse(content, Scope.PRODUCTION) == []

    def test_null_name_accepted(self, tmp_path):
        path = write_manifest(tmp_path, {"name": None, "dependencies": {"a": "1.0.0"}})
        assert load(path)["name"] is None

    def test_non_object_root_still_rejected(self, tmp_path):
        path = write_manifest(tmp_path, "null")
        with pytest.raises(ParseError):
            load(path)
