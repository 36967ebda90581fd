"""Worktree operations service for git-worktree-keeper."""

import git
import os
from typing import Dict, Any, List, Tuple

from git_worktree_keeper.exceptions import NotARepositoryError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import WorktreeInfo
from git_worktree_keeper.services.git.operations import git_error

logger = get_logger(__name__)


def parse_worktree_porcelain(output: str) -> List[WorktreeInfo]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached", or "bare")
        (blank line between worktrees)

    The first entry is always the main working tree.

    Args:
        output: Raw porcelain output

    Returns:
        WorktreeInfo records in git's order
    """
    worktrees: List[WorktreeInfo] = []
    current: Dict[str, Any] = {}

    def flush() -> None:
        if current.get("path"):
            worktrees.append(
                WorktreeInfo(
                    path=current["path"],
                    branch_name=current.get("branch", ""),
                    commit_sha=current.get("HEAD", ""),
                    is_main=not worktrees,
                    is_detached=current.get("detached", False),
                    is_bare=current.get("bare", False),
                )
            )
        current.clear()

    for line in output.split("\n"):
        line = line.strip()

        if not line:
            # Empty line marks end of worktree entry
            flush()
            continue

        if line.startswith("worktree "):
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
        elif line == "detached":
            current["detached"] = True
        elif line == "bare":
            current["bare"] = True

    # Handle last entry if no trailing blank line
    flush()
    return worktrees


def parse_status_counts(output: str) -> Tuple[int, int]:
    """Count changed and untracked files in `git status --porcelain` output.

    Returns:
        Tuple of (changed, untracked)
    """
    changed = untracked = 0
    for line in output.split("\n"):
        if len(line) < 2:
            continue
        if line.startswith("??"):
            untracked += 1
        else:
            changed += 1
    return changed, untracked


class WorktreeService:
    """Service for managing git worktrees."""

    def __init__(self, repo_path: str):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the git repository
        """
        self.repo_path = repo_path

    def _get_repo(self) -> git.Repo:
        """Get a thread-safe git.Repo instance.

        Creates a new repo instance for each call to ensure thread safety.

        Returns:
            git.Repo: A fresh repository instance
        """
        try:
            return git.Repo(self.repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise NotARepositoryError(self.repo_path)

    def _run_in(self, worktree_path: str, *args: str) -> str:
        """Run a git command inside another worktree with `git -C <path>`."""
        repo = self._get_repo()
        return repo.git.execute(["git", "-C", worktree_path, *args])

    def get_worktree_info(self) -> List[WorktreeInfo]:
        """Get information about all worktrees.

        Returns:
            List of WorktreeInfo objects, main working tree first

        Raises:
            GitOperationError: If `git worktree list` fails
        """
        try:
            output = self._get_repo().git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            raise git_error("worktree list", e)

        worktrees = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def add_worktree(self, branch_name: str, path: str) -> None:
        """Create a worktree at path on a new branch started from HEAD.

        Raises:
            GitOperationError: If git refuses (branch exists, path taken, ...)
        """
        try:
            self._get_repo().git.worktree("add", "-b", branch_name, path, "HEAD")
            logger.info(f"Created worktree for {branch_name} at {path}")
        except git.exc.GitCommandError as e:
            error = git_error("worktree add", e, branch_name)
            logger.error(str(error))
            raise error

    def remove_worktree(self, path: str) -> None:
        """Force-remove the worktree at path, even when it is dirty.

        Raises:
            GitOperationError: If git cannot remove it
        """
        try:
            self._get_repo().git.worktree("remove", "--force", path)
            logger.info(f"Removed worktree at {path}")
        except git.exc.GitCommandError as e:
            error = git_error("worktree remove", e, path)
            logger.error(str(error))
            raise error

    def rename_branch(self, old_name: str, new_name: str) -> None:
        """Rename a branch; worktrees that have it checked out follow along.

        Raises:
            GitOperationError: If git rejects the new name or it exists
        """
        try:
            self._get_repo().git.branch("-m", old_name, new_name)
            logger.info(f"Renamed branch {old_name} to {new_name}")
        except git.exc.GitCommandError as e:
            error = git_error("branch -m", e, old_name)
            logger.error(str(error))
            raise error

    def get_status_counts(self, worktree_path: str) -> Tuple[int, int]:
        """Count changed and untracked files of a worktree.

        Returns:
            Tuple of (changed, untracked), (0, 0) when the directory is gone
        """
        if not os.path.exists(worktree_path):
            logger.debug(f"Worktree path {worktree_path} doesn't exist (orphaned)")
            return 0, 0
        try:
            return parse_status_counts(self._run_in(worktree_path, "status", "--porcelain"))
        except git.exc.GitCommandError as e:
            logger.warning(f"Could not check worktree status for {worktree_path}: {git_error('status', e)}")
            return 0, 0

    def get_head_sha(self, worktree_path: str) -> str:
        """Short SHA of HEAD in a worktree, or "" when it has no commit."""
        try:
            return self._run_in(worktree_path, "rev-parse", "--short", "HEAD").strip()
        except git.exc.GitCommandError:
            return ""

    def exclude_worktree_dir(self, dir_name: str) -> None:
        """Add "/<dir_name>/" to the repository's info/exclude once.

        Keeps linked worktrees under the main tree from showing up as
        untracked files there.
        """
        exclude_path = os.path.join(str(self._get_repo().common_dir), "info", "exclude")
        pattern = f"/{dir_name}/"
        try:
            existing = ""
            if os.path.exists(exclude_path):
                with open(exclude_path, "r", encoding="utf-8") as f:
                    existing = f.read()
            if pattern in existing.split("\n"):
                return
            os.makedirs(os.path.dirname(exclude_path), exist_ok=True)
            with open(exclude_path, "a", encoding="utf-8") as f:
                if existing and not existing.endswith("\n"):
                    f.write("\n")
                f.write(pattern + "\n")
            logger.debug(f"Added {pattern} to {exclude_path}")
        except OSError as e:
            logger.warning(f"Could not update {exclude_path}: {e}")
