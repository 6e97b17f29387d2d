"""Shared test fixtures for PrintGuard tests."""

import shutil
import subprocess

import pytest

from printguard.config import GuardSettings
from printguard.models import ScanPolicy


@pytest.fixture
def settings(tmp_path):
    return GuardSettings(workdir=tmp_path)


@pytest.fixture
def block_policy():
    return ScanPolicy(
        file_extensions=(".ts",),
        warn_only=False,
        search_terms=("console.log",),
        has_line_details=False,
    )


@pytest.fixture
def git_repo(tmp_path):
    """An empty git repository; returns its resolved path."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q"], cwd=repo, check=True)
    subprocess.run(["git", "config", "core.hooksPath", ".git/hooks"], cwd=repo, check=True)
    return repo.resolve()


@pytest.fixture
def stage():
    """Write a file under a repository and add it to the index."""

    def _stage(repo, name, content):
        path = repo / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        subprocess.run(["git", "add", "--", name], cwd=repo, check=True)
        return path

    return _stage
