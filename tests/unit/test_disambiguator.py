"""
Unit tests for label disambiguation and catalog construction.
"""

import itertools
import logging
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from projfind.models.catalog import Strategy
from projfind.models.config import ProjectConfig
from projfind.tools.catalog_builder import build_catalog
from projfind.tools.disambiguator import detect_collisions, disambiguate, group_by_base_name

from fakes import FakeRunner, make_tree, real_path


class TestDisambiguate:
    """Test cases for the disambiguate function."""

    def test_unique_base_names_are_labels(self):
        entries = disambiguate(["/p/src/main.py", "/p/docs/readme.md"])

        assert [(e.label, e.full_path) for e in entries] == [
            ("main.py", "/p/src/main.py"),
            ("readme.md", "/p/docs/readme.md"),
        ]

    def test_shared_base_names_get_parent_suffix(self):
        entries = disambiguate(["/p/a/foo.txt", "/p/b/foo.txt", "/p/c/bar.txt"])

        assert {e.label: e.full_path for e in entries} == {
            "foo.txt: a": "/p/a/foo.txt",
            "foo.txt: b": "/p/b/foo.txt",
            "bar.txt": "/p/c/bar.txt",
        }

    def test_suffix_uses_immediate_parent_not_root_relative_path(self):
        entries = disambiguate(["/p/x/y/util.py", "/p/z/util.py"])

        assert sorted(e.label for e in entries) == ["util.py: y", "util.py: z"]

    def test_every_member_of_a_bucket_is_suffixed(self):
        entries = disambiguate(["/p/a/m.c", "/p/b/m.c", "/p/c/m.c", "/p/d/other.c"])
        labels = [e.label for e in entries]

        assert "m.c" not in labels
        assert labels.count("other.c") == 1

    def test_output_sorted_by_label(self):
        entries = disambiguate(["/p/z.txt", "/p/b/a.txt", "/p/m.txt", "/p/a/a.txt"])

        assert [e.label for e in entries] == ["a.txt: a", "a.txt: b", "m.txt", "z.txt"]

    def test_custom_separator(self):
        entries = disambiguate(["/p/a/f.py", "/p/b/f.py"], separator=" @ ")

        assert [e.label for e in entries] == ["f.py @ a", "f.py @ b"]

    def test_order_independent(self):
        raw = ["/p/a/foo.txt", "/p/b/foo.txt", "/p/c/bar.txt", "/p/d/baz.txt", "/p/e/baz.txt"]
        expected = disambiguate(raw)

        for permutation in itertools.permutations(raw):
            assert disambiguate(list(permutation)) == expected

    def test_labels_unique_when_parents_differ(self):
        raw = [f"/p/dir{i}/same.py" for i in range(20)] + [f"/p/x/file{i}.py" for i in range(20)]
        labels = [e.label for e in disambiguate(raw)]

        assert len(labels) == len(set(labels)) == 40

    def test_empty_input(self):
        assert disambiguate([]) == []

    def test_residual_collision_reported(self):
        raw = ["/one/lib/util.py", "/two/lib/util.py", "/two/src/util.py"]
        entries = disambiguate(raw)

        assert detect_collisions(entries) == {
            "util.py: lib": ["/one/lib/util.py", "/two/lib/util.py"],
        }

    def test_group_by_base_name(self):
        groups = group_by_base_name(["/p/a/x.py", "/p/b/x.py", "/p/y.py"])

        assert sorted(groups) == ["x.py", "y.py"]
        assert len(groups["x.py"]) == 2


class TestBuildCatalog:
    """Test cases for build_catalog glue."""

    def setup_method(self):
        self.temp_dir = real_path(tempfile.mkdtemp())
        self.root = Path(self.temp_dir)
        make_tree(self.root, ["a/foo.txt", "b/foo.txt", "c/bar.txt"])
        self.config = ProjectConfig(patterns=["*.txt"])

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_accelerated_catalog(self):
        runner = FakeRunner(repo_tops=[self.root], ls_output="a/foo.txt\nb/foo.txt\nc/bar.txt\n")

        catalog = build_catalog(self.root / "a", self.config, runner)

        assert catalog.root == str(self.root)
        assert catalog.strategy is Strategy.ACCELERATED
        assert catalog.as_mapping() == {
            "bar.txt": str(self.root / "c/bar.txt"),
            "foo.txt: a": str(self.root / "a/foo.txt"),
            "foo.txt: b": str(self.root / "b/foo.txt"),
        }

    def test_truncated_catalog_independent_of_listing_order(self):
        config = self.config.with_overrides(limits={'max_files': 2})

        for order in itertools.permutations(["a/foo.txt", "b/foo.txt", "c/bar.txt"]):
            runner = FakeRunner(repo_tops=[self.root], ls_output="\n".join(order))
            catalog = build_catalog(self.root, config, runner)
            assert catalog.as_mapping() == {
                "foo.txt: a": str(self.root / "a/foo.txt"),
                "foo.txt: b": str(self.root / "b/foo.txt"),
            }

    def test_fallback_catalog_outside_repository(self):
        output = "".join(f"{self.root / p}\n" for p in ("a/foo.txt", "b/foo.txt", "c/bar.txt"))
        runner = FakeRunner(find_output=output)

        catalog = build_catalog(self.root, self.config, runner)

        assert catalog.strategy is Strategy.FALLBACK
        assert catalog.root == str(self.root)
        assert catalog.labels() == ["bar.txt", "foo.txt: a", "foo.txt: b"]

    def test_empty_catalog(self):
        runner = FakeRunner(repo_tops=[self.root], ls_output="")

        catalog = build_catalog(self.root, self.config, runner)

        assert catalog.is_empty()
        assert len(catalog) == 0

    def test_residual_collision_keeps_first_path(self, caplog):
        runner = FakeRunner(repo_tops=[self.root], ls_output="one/lib/util.txt\ntwo/lib/util.txt\n")

        with caplog.at_level(logging.WARNING):
            catalog = build_catalog(self.root, self.config, runner)

        assert catalog.as_mapping() == {"util.txt: lib": str(self.root / "one/lib/util.txt")}
        assert "shared by 2 files" in caplog.text

    @pytest.mark.skipif(shutil.which("find") is None, reason="find is not installed")
    def test_end_to_end_with_find(self):
        config = self.config.with_overrides(commands={'vcs': 'projfind-no-such-vcs'})

        catalog = build_catalog(self.root, config)

        assert catalog.as_mapping() == {
            "bar.txt": str(self.root / "c/bar.txt"),
            "foo.txt: a": str(self.root / "a/foo.txt"),
            "foo.txt: b": str(self.root / "b/foo.txt"),
        }
