"""
Shared pytest fixtures for autopush tests.

Provides a real git working tree with a bare "origin" remote so the git
client and the full cycle can be exercised without mocks.
"""

from dataclasses import dataclass
from pathlib import Path

import pytest
from git import Repo


@dataclass
class GitWorkspace:
    root: Path
    remote: Repo
    repo: Repo

    @property
    def path(self) -> Path:
        return Path(self.repo.working_tree_dir)


def init_repo(path: Path) -> Repo:
    repo = Repo.init(path)
    repo.git.symbolic_ref("HEAD", "refs/heads/main")
    with repo.config_writer() as config:
        config.set_value("user", "name", "Autopush Test")
        config.set_value("user", "email", "autopush@example.com")
        config.set_value("commit", "gpgsign", "false")
    return repo


@pytest.fixture
def git_workspace(tmp_path) -> GitWorkspace:
    """
    Working tree at tmp/work with:
        docs/a.txt   ("hello")  - the monitored directory
        notes.txt    ("outside") - outside the monitored target
    committed and pushed to tmp/remote.git as main.
    """
    remote = Repo.init(tmp_path / "remote.git", bare=True)
    remote.git.symbolic_ref("HEAD", "refs/heads/main")

    work = tmp_path / "work"
    repo = init_repo(work)

    (work / "docs").mkdir()
    (work / "docs" / "a.txt").write_text("hello")
    (work / "notes.txt").write_text("outside")

    repo.git.add("--all")
    repo.git.commit("-m", "Initial commit")
    repo.git.remote("add", "origin", str(tmp_path / "remote.git"))
    repo.git.push("origin", "main")

    return GitWorkspace(root=tmp_path, remote=remote, repo=repo)
