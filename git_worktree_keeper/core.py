"""Core functionality for git-worktree-keeper"""

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Dict, List, Optional, Union

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import BARE_LABEL, DETACHED_LABEL
from git_worktree_keeper.exceptions import NoCommitsError
from git_worktree_keeper.formatters import worktree_dir_name
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.commit import CommitDetail
from git_worktree_keeper.models.pull_request import PRBadge
from git_worktree_keeper.models.repository import RepoSummary
from git_worktree_keeper.models.worktree import WorktreeEntry, WorktreeInfo
from git_worktree_keeper.services.git import CommitQueries, GitOperations, WorktreeService
from git_worktree_keeper.services.github_service import GitHubService
from git_worktree_keeper.services.metadata_service import MetadataService, WorktreeMetadata
from git_worktree_keeper.services.shell_service import ShellService
from git_worktree_keeper.utils import get_optimal_worker_count

logger = get_logger(__name__)


def display_name_for(info: WorktreeInfo, metadata: Optional[WorktreeMetadata]) -> str:
    """Name shown in the list: metadata name, branch, state label or directory."""
    if metadata and metadata.name:
        return metadata.name
    if info.branch_name:
        return info.branch_name
    if info.is_bare:
        return BARE_LABEL
    if info.is_detached:
        return DETACHED_LABEL
    return os.path.basename(info.path.rstrip("/")) or info.path


class WorktreeKeeper:
    """Everything the interactive app needs from git, GitHub and the filesystem.

    Every method is a blocking request/response call; the app runs them on
    worker threads and never touches the services directly.
    """

    def __init__(self, config: Union[Config, dict]):
        """Initialize WorktreeKeeper.

        Args:
            config: Configuration dict or Config object
        """
        # Convert dict to Config if needed
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config
        self.repo_path = self.config.repo_path
        self.debug_mode = self.config.debug

        self.git_operations = GitOperations(self.repo_path, self.config)
        self.worktree_service = WorktreeService(self.repo_path)
        self.commit_queries = CommitQueries(self.repo_path, self.config.commit_limit)
        self.github_service = GitHubService(self.repo_path, self.config)
        self.shell_service = ShellService(self.config)
        self._github_ready = False

    def _metadata(self) -> MetadataService:
        # The common dir only exists once the repository does
        return MetadataService(self.git_operations.get_common_dir())

    def _ensure_github(self) -> None:
        """Setup GitHub integration once, on first use."""
        if self._github_ready:
            return
        self._github_ready = True
        try:
            remote_url = self.git_operations.get_remote_url()
            logger.debug(f"Setting up GitHub API with remote: {remote_url or '(none)'}")
            self.github_service.setup_github_api(remote_url)
        except Exception as e:
            logger.debug(f"Failed to setup GitHub API: {e}")

    # Repository

    def is_repository(self) -> bool:
        return self.git_operations.is_repository()

    def has_commits(self) -> bool:
        return self.git_operations.has_commits()

    def initialize_repository(self) -> None:
        """Run `git init` in the working directory."""
        self.git_operations.init_repository()

    def repository_summary(self) -> RepoSummary:
        """Header facts, including whether PR badges can be looked up."""
        self._ensure_github()
        summary = self.git_operations.get_repo_summary()
        return replace(summary, pr_lookup_available=self.github_service.is_available())

    # Worktrees

    def list_worktrees(self) -> List[WorktreeEntry]:
        """Load every worktree with its status, metadata and recent commits.

        The primary worktree comes first, the rest follow git's order.

        Raises:
            GitOperationError: If the worktree list itself cannot be read
        """
        infos = self.worktree_service.get_worktree_info()
        if not infos:
            return []

        metadata = self._metadata().load()
        default_branch = self.git_operations.get_default_branch()

        def build(info: WorktreeInfo) -> WorktreeEntry:
            return self._build_entry(info, metadata, default_branch)

        # Debug mode loads sequentially so log lines stay in order
        if self.debug_mode or len(infos) == 1:
            return [build(info) for info in infos]

        max_workers = get_optimal_worker_count(len(infos))
        logger.debug(f"Loading {len(infos)} worktrees with {max_workers} workers")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # map() keeps git's order
            return list(executor.map(build, infos))

    def _build_entry(
        self,
        info: WorktreeInfo,
        metadata: Dict[str, WorktreeMetadata],
        default_branch: str,
    ) -> WorktreeEntry:
        meta = metadata.get(info.branch_name) if info.branch_name else None

        if info.is_main:
            ahead, behind, is_merged = 0, 0, False
        else:
            ahead, behind, is_merged = self.git_operations.get_branch_status(
                info.branch_name, default_branch
            )

        if info.is_bare:
            changed, untracked = 0, 0
        else:
            changed, untracked = self.worktree_service.get_status_counts(info.path)

        return WorktreeEntry(
            name=display_name_for(info, meta),
            path=info.path,
            branch=info.branch_name,
            is_main=info.is_main,
            updated_at=self.git_operations.get_last_updated(info.path),
            description=meta.description if meta else "",
            created_from=meta.created_from if meta else "",
            ahead=ahead,
            behind=behind,
            is_merged=is_merged,
            commits=tuple(self.commit_queries.get_recent_commits(info.path)),
            head_sha=self.worktree_service.get_head_sha(info.path),
            changed_count=changed,
            untracked_count=untracked,
        )

    def worktree_path_for(self, branch: str) -> str:
        """Where a new worktree for branch is created."""
        return os.path.join(
            self.git_operations.get_repo_root(),
            self.config.worktree_dir_name,
            worktree_dir_name(branch),
        )

    def create_worktree(
        self,
        branch: str,
        path: Optional[str] = None,
        display_name: str = "",
        description: str = "",
    ) -> str:
        """Create a worktree on a new branch started from HEAD.

        Args:
            branch: Name of the new branch
            path: Worktree directory, defaults to worktree_path_for(branch)
            display_name: Name shown in the list instead of the branch
            description: Free text shown in the detail pane

        Returns:
            Path of the new worktree

        Raises:
            NoCommitsError: If the repository has no commit to branch from
            GitOperationError: If git refuses to create the worktree
        """
        if not self.has_commits():
            raise NoCommitsError()

        if path is None:
            path = self.worktree_path_for(branch)
        created_from = self.git_operations.get_head_sha()

        self.worktree_service.exclude_worktree_dir(self.config.worktree_dir_name)
        self.worktree_service.add_worktree(branch, path)
        self._metadata().save(
            branch,
            WorktreeMetadata(name=display_name, description=description, created_from=created_from),
        )
        return path

    def delete_worktree(self, path: str, branch: Optional[str] = None) -> None:
        """Force-remove a worktree and forget its metadata.

        The branch itself is kept.
        """
        self.worktree_service.remove_worktree(path)
        if branch:
            self._metadata().delete(branch)

    def rename_branch(self, old_name: str, new_name: str) -> None:
        """Rename a branch and move its metadata along."""
        self.worktree_service.rename_branch(old_name, new_name)
        self._metadata().rename(old_name, new_name)

    # Commits and pull requests

    def get_commit_detail(self, worktree_path: str, commit_hash: str) -> CommitDetail:
        return self.commit_queries.get_commit_detail(worktree_path, commit_hash)

    def get_pr_status(self, branch: str) -> Optional[PRBadge]:
        """PR badge for a branch; None when there is none or lookup failed."""
        self._ensure_github()
        return self.github_service.get_pr_status(branch)

    # Shell integration

    def is_first_run_done(self) -> bool:
        return self.shell_service.is_first_run_done()

    def mark_first_run_done(self) -> None:
        self.shell_service.mark_first_run_done()

    def install_shell_integration(self) -> None:
        self.shell_service.install_shell_integration()

    def record_change_directory(self, path: str) -> None:
        self.shell_service.record_change_directory(path)

    def close(self) -> None:
        """Release the GitHub connection."""
        self.github_service.close()
