import os
import logging
from typing import List

from git import Repo, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..errors import CycleError, NotAWorkTreeError, RepositoryEnvironmentError
from ..models.change import CycleStage

logger = logging.getLogger(__name__)


class VersionControlClient:
    """
    Narrow wrapper over the git operations the watcher needs.
    Stage failures are raised as CycleError with the failing stage attached.
    """

    def __init__(self, repo_path: str):
        self.repo_path = os.path.abspath(repo_path)

        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except NoSuchPathError as e:
            raise RepositoryEnvironmentError(f"cannot cd to repo path: {repo_path}") from e
        except InvalidGitRepositoryError as e:
            raise NotAWorkTreeError(f"{repo_path} is not a git repository.") from e

        if not self.is_work_tree():
            raise NotAWorkTreeError(f"{repo_path} is not a git repository.")

        logger.info(f"Valid git repository found: {self.repo.working_tree_dir}")

    @property
    def name(self) -> str:
        return os.path.basename(os.path.normpath(self.repo_path))

    def is_work_tree(self) -> bool:
        try:
            return self.repo.git.rev_parse("--is-inside-work-tree").strip() == "true"
        except GitCommandError:
            return False

    def pathspec(self, path: str) -> str:
        """
        Express path relative to the working tree root, which is where git
        commands run
        """
        root = os.path.realpath(self.repo.working_tree_dir)
        return os.path.relpath(os.path.realpath(path), root)

    def stage(self, path: str) -> None:
        """Stage additions, modifications and deletions under path only"""
        try:
            self.repo.git.add("--all", "--", self.pathspec(path))
        except GitCommandError as e:
            raise CycleError(CycleStage.STAGE.value, "git add failed", e.stderr) from e

    def has_staged_changes(self) -> bool:
        try:
            self.repo.git.diff("--cached", "--quiet")
            return False
        except GitCommandError as e:
            # --quiet exits 1 when there are differences
            if e.status == 1:
                return True
            raise CycleError(CycleStage.STAGE.value, "git diff --cached failed", e.stderr) from e

    def staged_files(self) -> List[str]:
        try:
            output = self.repo.git.diff("--cached", "--name-only")
        except GitCommandError as e:
            raise CycleError(CycleStage.STAGE.value, "git diff --cached failed", e.stderr) from e
        return [line for line in output.splitlines() if line.strip()]

    def commit(self, message: str) -> str:
        """Commit the index and return the new commit hash"""
        try:
            self.repo.git.commit("-m", message)
        except GitCommandError as e:
            raise CycleError(CycleStage.COMMIT.value, "git commit failed.", e.stderr or e.stdout) from e
        return self.repo.head.commit.hexsha

    def list_remotes(self) -> str:
        try:
            return self.repo.git.remote("-v")
        except GitCommandError as e:
            logger.error(f"git remote -v failed: {e.stderr}")
            return ""

    def push(self, remote: str, branch: str) -> None:
        try:
            self.repo.git.push(remote, branch)
        except GitCommandError as e:
            raise CycleError(CycleStage.PUSH.value, "git push failed", e.stderr) from e
