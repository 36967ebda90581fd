"""Git operations service"""

import git
import os
import time
from pathlib import Path
from typing import Union, TYPE_CHECKING, Optional, Tuple

from git_worktree_keeper.constants import NEVER_UPDATED
from git_worktree_keeper.exceptions import GitOperationError, NotARepositoryError
from git_worktree_keeper.formatters import format_relative_duration
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import RepoSummary

if TYPE_CHECKING:
    from git_worktree_keeper.config import Config

logger = get_logger(__name__)

_URL_PREFIXES = ("https://", "http://", "git@", "ssh://")


def git_error(operation: str, error: git.exc.GitCommandError, target: Optional[str] = None) -> GitOperationError:
    """Fold a GitCommandError into a GitOperationError carrying git's stderr.

    Args:
        operation: Short name of the git operation, e.g. "worktree add"
        error: The error raised by GitPython
        target: Branch or path the operation was acting on

    Returns:
        GitOperationError whose message is git's stderr, or the exit status
    """
    stderr = (error.stderr if hasattr(error, "stderr") and error.stderr else "").strip()
    # GitPython prefixes captured stderr with "stderr: '...'"
    if stderr.startswith("stderr: "):
        stderr = stderr[len("stderr: "):].strip("'").strip()
    if not stderr:
        status = error.status if hasattr(error, "status") else "unknown"
        stderr = f"exit code {status}"
    return GitOperationError(operation, target, stderr)


def shorten_remote_url(url: str) -> str:
    """Shorten a remote URL to "host/org/repo".

    Example:
        "git@github.com:org/repo.git" -> "github.com/org/repo"
        "https://github.com/org/repo.git" -> "github.com/org/repo"
    """
    for prefix in _URL_PREFIXES:
        if url.startswith(prefix):
            url = url[len(prefix):]
    url = url.replace(":", "/", 1)
    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url


class GitOperations:
    """Service for repository-wide Git queries."""

    def __init__(self, repo_path: str, config: Union["Config", dict]):
        """Initialize the service.

        Args:
            repo_path: Path inside the git repository (string path, not repo object)
            config: Configuration dictionary or Config object
        """
        self.repo_path = repo_path
        self.config = config
        self.verbose = config.get("verbose", False)
        self.debug_mode = config.get("debug", False)
        self.remote_name = "origin"  # Store remote name, not object

        logger.debug("Git operations initialized")

    def _get_repo(self) -> git.Repo:
        """Get a thread-safe git.Repo instance.

        Creates a new repo instance for each call to ensure thread safety.
        GitPython repos are lightweight - they don't clone, just open the existing repo.

        Returns:
            git.Repo: A fresh repository instance

        Raises:
            NotARepositoryError: If repo_path is not inside a git repository
        """
        try:
            return git.Repo(self.repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise NotARepositoryError(self.repo_path)

    def is_repository(self) -> bool:
        """Check whether repo_path is inside a git repository."""
        try:
            self._get_repo()
            return True
        except NotARepositoryError:
            logger.debug(f"No git repository at {self.repo_path}")
            return False

    def init_repository(self) -> None:
        """Run `git init` in repo_path."""
        try:
            git.Repo.init(self.repo_path)
            logger.info(f"Initialized git repository in {self.repo_path}")
        except git.exc.GitCommandError as e:
            raise git_error("init", e, self.repo_path)

    def get_repo_root(self) -> str:
        """Absolute path of the main working tree."""
        repo = self._get_repo()
        common_dir = Path(self.get_common_dir())
        # Linked worktrees share the main tree's .git directory
        if common_dir.name == ".git":
            return str(common_dir.parent)
        return str(repo.working_tree_dir)

    def get_common_dir(self) -> str:
        """The .git directory shared by every worktree."""
        # GitPython joins the commondir file verbatim, e.g. ".git/worktrees/x/../.."
        return os.path.realpath(self._get_repo().common_dir)

    def has_commits(self) -> bool:
        """Check whether HEAD points at a commit."""
        try:
            return self._get_repo().head.is_valid()
        except NotARepositoryError:
            return False

    def get_head_sha(self, short: bool = True) -> str:
        """SHA of HEAD in repo_path, or "" when there is none."""
        try:
            repo = self._get_repo()
            args = ["--short", "HEAD"] if short else ["HEAD"]
            return repo.git.rev_parse(*args).strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not resolve HEAD: {e}")
            return ""

    def get_default_branch(self) -> str:
        """Detect the repository's default branch.

        Uses origin/HEAD when it is set, otherwise "main" when that branch
        exists, otherwise "master".
        """
        repo = self._get_repo()
        try:
            ref = repo.git.symbolic_ref("--short", f"refs/remotes/{self.remote_name}/HEAD").strip()
            if "/" in ref:
                return ref.split("/", 1)[1]
        except git.exc.GitCommandError:
            logger.debug("origin/HEAD is not set")

        try:
            repo.git.rev_parse("--verify", "main")
            return "main"
        except git.exc.GitCommandError:
            return "master"

    def get_branch_status(self, branch_name: str, default_branch: str) -> Tuple[int, int, bool]:
        """Ahead/behind counts against the default branch and merged state.

        Each query degrades to zero/False on failure so one broken branch
        never hides the rest of the list.

        Returns:
            Tuple of (ahead, behind, is_merged)
        """
        if not branch_name or branch_name == default_branch:
            return 0, 0, False

        repo = self._get_repo()
        ahead = behind = 0
        is_merged = False

        try:
            ahead = int(repo.git.rev_list("--count", f"{default_branch}..{branch_name}").strip() or 0)
        except (git.exc.GitCommandError, ValueError) as e:
            logger.debug(f"Could not count commits ahead for {branch_name}: {e}")
        try:
            behind = int(repo.git.rev_list("--count", f"{branch_name}..{default_branch}").strip() or 0)
        except (git.exc.GitCommandError, ValueError) as e:
            logger.debug(f"Could not count commits behind for {branch_name}: {e}")
        try:
            merged = repo.git.branch("--merged", default_branch)
            for line in merged.split("\n"):
                # "* " marks the current branch, "+ " a branch checked out elsewhere
                name = line.strip().lstrip("*+").strip()
                if name == branch_name:
                    is_merged = True
                    break
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not check merged state for {branch_name}: {e}")

        return ahead, behind, is_merged

    def get_remote_url(self) -> str:
        """Raw URL of the origin remote, or "" when there is none."""
        try:
            return self._get_repo().git.remote("get-url", self.remote_name).strip()
        except git.exc.GitCommandError:
            logger.debug(f"No {self.remote_name} remote configured")
            return ""

    def get_stash_count(self) -> int:
        """Number of stash entries."""
        try:
            output = self._get_repo().git.stash("list").strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not list stashes: {e}")
            return 0
        if not output:
            return 0
        return len(output.split("\n"))

    def get_fetched_ago(self) -> str:
        """Relative time since the last fetch, or "" when never fetched."""
        fetch_head = Path(self.get_common_dir()) / "FETCH_HEAD"
        try:
            mtime = os.path.getmtime(fetch_head)
        except OSError:
            return ""
        return format_relative_duration(time.time() - mtime)

    def get_last_updated(self, worktree_path: str) -> str:
        """Relative time of the last commit in a worktree, or "never"."""
        try:
            repo = self._get_repo()
            updated = repo.git.execute(["git", "-C", worktree_path, "log", "-1", "--format=%cr"]).strip()
            return updated or NEVER_UPDATED
        except git.exc.GitCommandError:
            return NEVER_UPDATED

    def get_repo_summary(self) -> RepoSummary:
        """Collect the repository facts shown in the header.

        PR lookup availability is not a git fact and is left False; the
        caller fills it in.
        """
        return RepoSummary(
            remote_url=shorten_remote_url(self.get_remote_url()),
            stash_count=self.get_stash_count(),
            fetched_ago=self.get_fetched_ago(),
            default_branch=self.get_default_branch(),
            has_commits=self.has_commits(),
        )
