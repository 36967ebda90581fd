"""Configuration handling for git-worktree-keeper"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from git_worktree_keeper.constants import BRANCH_TYPES, COMMIT_LIMIT, WORKTREE_DIR_NAME


def _default_marker_path() -> str:
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return str(Path(config_home) / "git-worktree-keeper" / "integrated")


def _default_cd_path_file() -> str:
    return str(Path(tempfile.gettempdir()) / ".wt_cd_path")


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    # Repository
    repo_path: str = field(default_factory=os.getcwd)
    worktree_dir_name: str = WORKTREE_DIR_NAME
    branch_types: List[str] = field(default_factory=lambda: list(BRANCH_TYPES))
    commit_limit: int = COMMIT_LIMIT

    # GitHub integration (PR badges)
    github_token: Optional[str] = None

    # Shell integration
    marker_path: str = field(default_factory=_default_marker_path)
    cd_path_file: str = field(default_factory=_default_cd_path_file)
    shell: Optional[str] = None  # None = read $SHELL at install time

    # Execution modes
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_repo_path()
        self._validate_worktree_dir_name()
        self._validate_branch_types()
        self._validate_commit_limit()

    def _validate_repo_path(self):
        """Validate repo_path is not empty."""
        if not self.repo_path or not str(self.repo_path).strip():
            raise ValueError("repo_path cannot be empty")
        self.repo_path = str(self.repo_path).strip()

    def _validate_worktree_dir_name(self):
        """Validate worktree_dir_name is a single relative path component."""
        name = (self.worktree_dir_name or "").strip()
        if not name or "/" in name or name in (".", ".."):
            raise ValueError(f"worktree_dir_name must be a plain directory name, got '{self.worktree_dir_name}'")
        self.worktree_dir_name = name

    def _validate_branch_types(self):
        """Validate branch_types is a non-empty list of non-empty names."""
        if not isinstance(self.branch_types, list) or not self.branch_types:
            raise ValueError("branch_types must be a non-empty list")
        if any(not t or not t.strip() for t in self.branch_types):
            raise ValueError("branch_types cannot contain empty names")

    def _validate_commit_limit(self):
        """Validate commit_limit is positive."""
        if self.commit_limit <= 0:
            raise ValueError(f"commit_limit must be positive, got {self.commit_limit}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "repo_path": self.repo_path,
            "worktree_dir_name": self.worktree_dir_name,
            "branch_types": self.branch_types,
            "commit_limit": self.commit_limit,
            "github_token": self.github_token,
            "marker_path": self.marker_path,
            "cd_path_file": self.cd_path_file,
            "shell": self.shell,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {
            "repo_path",
            "worktree_dir_name",
            "branch_types",
            "commit_limit",
            "github_token",
            "marker_path",
            "cd_path_file",
            "shell",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
