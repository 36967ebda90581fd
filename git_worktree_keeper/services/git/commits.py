"""Commit history queries for git-worktree-keeper."""

import git
from typing import List

from git_worktree_keeper.constants import COMMIT_LIMIT
from git_worktree_keeper.exceptions import NotARepositoryError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.commit import (
    CommitDetail,
    CommitFileChange,
    CommitSummary,
    DiffLine,
    DiffLineKind,
)
from git_worktree_keeper.services.git.operations import git_error

logger = get_logger(__name__)

# Prefixes of patch lines that describe a file rather than its content
_METADATA_PREFIXES = ("index ", "new file", "deleted file", "--- ", "+++ ")

_LOG_SEPARATOR = "|"


def parse_commit_log(output: str) -> List[CommitSummary]:
    """Parse `git log --format=%h|%s|%cr` output.

    Subjects may contain the separator; the relative time never does, so
    the last field is split off from the right.
    """
    commits = []
    for line in output.split("\n"):
        if not line.strip():
            continue
        short_hash, sep, rest = line.partition(_LOG_SEPARATOR)
        subject, sep2, relative_time = rest.rpartition(_LOG_SEPARATOR)
        if not sep or not sep2:
            continue
        commits.append(CommitSummary(short_hash=short_hash, subject=subject, relative_time=relative_time))
    return commits


def parse_name_status(output: str) -> List[CommitFileChange]:
    """Parse `git show --name-status` output.

    Rename and copy scores ("R090") are cut to their letter, and for those
    the destination path (the last field) is kept.
    """
    files = []
    for line in output.split("\n"):
        line = line.strip()
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        files.append(CommitFileChange(status=parts[0][:1], path=parts[-1]))
    return files


def classify_diff_line(line: str) -> DiffLineKind:
    """Categorize one line of a unified patch."""
    if line.startswith("diff --git"):
        return DiffLineKind.FILE_HEADER
    if line.startswith(_METADATA_PREFIXES):
        return DiffLineKind.METADATA
    if line.startswith("@@"):
        return DiffLineKind.HUNK_HEADER
    if line.startswith("+"):
        return DiffLineKind.ADDED
    if line.startswith("-"):
        return DiffLineKind.REMOVED
    return DiffLineKind.CONTEXT


def parse_patch(output: str) -> List[DiffLine]:
    """Split patch output into classified lines, content kept verbatim."""
    if not output:
        return []
    return [DiffLine(kind=classify_diff_line(line), content=line) for line in output.split("\n")]


class CommitQueries:
    """Service for reading commit history of a worktree."""

    def __init__(self, repo_path: str, commit_limit: int = COMMIT_LIMIT):
        """Initialize the commit queries service.

        Args:
            repo_path: Path to the git repository
            commit_limit: Number of recent commits listed per worktree
        """
        self.repo_path = repo_path
        self.commit_limit = commit_limit

    def _get_repo(self) -> git.Repo:
        try:
            return git.Repo(self.repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise NotARepositoryError(self.repo_path)

    def _run_in(self, worktree_path: str, *args: str) -> str:
        return self._get_repo().git.execute(["git", "-C", worktree_path, *args])

    def get_recent_commits(self, worktree_path: str) -> List[CommitSummary]:
        """Most recent commits of a worktree, newest first.

        Returns:
            Up to commit_limit summaries; empty when there is no commit
        """
        try:
            output = self._run_in(
                worktree_path, "log", f"-{self.commit_limit}", "--format=%h|%s|%cr"
            )
        except git.exc.GitCommandError as e:
            logger.debug(f"No commits for {worktree_path}: {e}")
            return []
        return parse_commit_log(output)

    def get_commit_detail(self, worktree_path: str, commit_hash: str) -> CommitDetail:
        """Load metadata, changed files and patch of one commit.

        Args:
            worktree_path: Worktree the commit is shown from
            commit_hash: Short or full SHA

        Returns:
            CommitDetail with loaded=True

        Raises:
            GitOperationError: If the commit cannot be read
        """
        try:
            # Body may span lines, so it is read on its own
            header = self._run_in(
                worktree_path, "show", commit_hash, "--no-patch", "--pretty=format:%h%n%cr%n%s"
            )
            body = self._run_in(worktree_path, "show", commit_hash, "--no-patch", "--pretty=format:%b")
            name_status = self._run_in(
                worktree_path, "show", commit_hash, "--name-status", "--pretty=format:"
            )
            patch = self._run_in(
                worktree_path, "show", commit_hash, "--patch", "--no-color", "--pretty=format:"
            )
        except git.exc.GitCommandError as e:
            raise git_error("show", e, commit_hash)

        short_hash, relative_time, subject = (header.split("\n", 2) + ["", "", ""])[:3]
        detail = CommitDetail(
            short_hash=short_hash,
            subject=subject,
            body=body.rstrip("\r\n"),
            relative_time=relative_time,
            files=tuple(parse_name_status(name_status)),
            diff=tuple(parse_patch(patch.strip("\n"))),
            loaded=True,
        )
        logger.debug(f"Loaded commit {short_hash}: {len(detail.files)} files, {len(detail.diff)} patch lines")
        return detail
