"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class GitOperationError(WorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, target: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.target = target
        self.message = message

        error_msg = f"git {operation} failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NoCommitsError(WorktreeKeeperError):
    """Raised when an operation needs at least one commit in the repository."""

    def __init__(self):
        super().__init__(
            "repo has no commits yet, make an initial commit on main before creating worktrees"
        )


class NotARepositoryError(WorktreeKeeperError):
    """Raised when the working directory is not inside a git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"not a git repository: {path}")


class ShellIntegrationError(WorktreeKeeperError):
    """Exception raised when the shell wrapper cannot be installed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"shell integration failed: {message}")


class GitHubAPIError(WorktreeKeeperError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)
