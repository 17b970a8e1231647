"""
Unit tests for project root detection.

Tests override handling, version-control top-level detection at any depth,
the start-directory fallback, and that the caller's working directory is
never changed.
"""

import os
import shutil
import subprocess
import tempfile
from pathlib import Path

import pytest

from projfind.models.config import ProjectConfig
from projfind.tools.commands import CommandResult
from projfind.tools.root_locator import RootLocator, start_directory

from fakes import FakeRunner, make_tree, real_path


class TestRootLocator:
    """Test cases for RootLocator with a simulated VCS."""

    def setup_method(self):
        self.temp_dir = real_path(tempfile.mkdtemp())
        self.repo = Path(self.temp_dir) / "repo"
        make_tree(self.repo, ["README.md", "src/pkg/deep/module.py"])
        self.outside = Path(self.temp_dir) / "outside"
        make_tree(self.outside, ["notes/todo.txt"])
        self.config = ProjectConfig()

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    @pytest.mark.parametrize("relative", ["", "src", "src/pkg", "src/pkg/deep"])
    def test_top_level_found_at_any_depth(self, relative):
        runner = FakeRunner(repo_tops=[self.repo])
        locator = RootLocator(self.config, runner)

        assert locator.locate(self.repo / relative) == self.repo

    def test_file_start_uses_its_directory(self):
        runner = FakeRunner(repo_tops=[self.repo])
        locator = RootLocator(self.config, runner)

        root = locator.locate(self.repo / "src/pkg/deep/module.py")

        assert root == self.repo
        assert runner.calls[0][1] == str(self.repo / "src/pkg/deep")

    def test_outside_repository_returns_start_directory(self):
        runner = FakeRunner(repo_tops=[self.repo])
        locator = RootLocator(self.config, runner)

        start = self.outside / "notes"
        assert locator.locate(start) == start
        # Only the repository check ran; no top-level query after a failed check.
        assert len(runner.calls) == 1

    def test_missing_vcs_is_not_a_repository(self):
        runner = FakeRunner(repo_tops=[self.repo], vcs_missing=True)
        locator = RootLocator(self.config, runner)

        assert locator.locate(self.repo / "src") == self.repo / "src"

    def test_override_is_used_verbatim(self):
        config = ProjectConfig(project_root=str(self.outside))
        runner = FakeRunner(repo_tops=[self.repo])

        root = RootLocator(config, runner).locate(self.repo / "src")

        assert root == self.outside
        assert runner.calls == []

    def test_vcs_runs_in_start_directory(self):
        runner = FakeRunner(repo_tops=[self.repo])
        RootLocator(self.config, runner).locate(self.repo / "src/pkg")

        assert [call[1] for call in runner.calls] == [str(self.repo / "src/pkg")] * 2
        assert runner.calls[1][0] == ['git', 'rev-parse', '--show-cdup']

    def test_configured_vcs_executable(self):
        config = ProjectConfig(commands={'vcs': '/opt/git/bin/git'})
        calls = []

        def runner(argv, cwd, timeout=None):
            calls.append(argv)
            return CommandResult(128, "", "not a repository")

        RootLocator(config, runner).locate(self.outside)
        assert calls[0][0] == '/opt/git/bin/git'

    def test_start_directory_of_directory(self):
        assert start_directory(self.outside) == self.outside


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestRootLocatorWithGit:
    """Integration tests against a real git working tree."""

    def setup_method(self):
        self.temp_dir = real_path(tempfile.mkdtemp())
        self.repo = Path(self.temp_dir) / "repo"
        make_tree(self.repo, ["a/b/c/file.py", "top.txt"])
        subprocess.run(["git", "init", "-q", str(self.repo)], check=True)
        self.original_cwd = os.getcwd()

    def teardown_method(self):
        os.chdir(self.original_cwd)
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_locates_top_level_from_nested_directory(self):
        locator = RootLocator(ProjectConfig())

        assert locator.locate(self.repo / "a/b/c") == self.repo
        assert locator.locate(self.repo / "a/b/c/file.py") == self.repo
        assert locator.locate(self.repo) == self.repo

    def test_caller_working_directory_is_unchanged(self):
        before = os.getcwd()
        RootLocator(ProjectConfig()).locate(self.repo / "a/b")
        assert os.getcwd() == before

    def test_is_repository(self):
        locator = RootLocator(ProjectConfig())

        assert locator.is_repository(self.repo / "a") is True
