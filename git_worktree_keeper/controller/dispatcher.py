"""Runs commands against the WorktreeKeeper facade.

dispatch() is called on a worker thread and always returns exactly one
completion message. Exceptions never cross this boundary: they are logged
and travel back as the message's error string.
"""

from typing import TYPE_CHECKING

from git_worktree_keeper.controller.commands import (
    CheckRepository,
    CompleteFirstRun,
    CreateWorktree,
    DeleteWorktree,
    FetchCommitDetail,
    FetchPRStatus,
    InitializeRepository,
    LoadWorktrees,
    RenameBranch,
    TERMINAL_COMMANDS,
)
from git_worktree_keeper.controller.messages import (
    BranchRenamed,
    CommitDetailLoaded,
    FirstRunCompleted,
    PRStatusFetched,
    RepositoryChecked,
    RepositoryInitialized,
    WorktreeCreated,
    WorktreeDeleted,
    WorktreesLoaded,
)
from git_worktree_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_worktree_keeper.core import WorktreeKeeper

logger = get_logger(__name__)


class CommandDispatcher:
    """Maps each command to the facade call that serves it."""

    def __init__(self, keeper: 'WorktreeKeeper'):
        self.keeper = keeper
        self._handlers = {
            CheckRepository: self._check_repository,
            LoadWorktrees: self._load_worktrees,
            FetchCommitDetail: self._fetch_commit_detail,
            FetchPRStatus: self._fetch_pr_status,
            InitializeRepository: self._initialize_repository,
            CompleteFirstRun: self._complete_first_run,
            CreateWorktree: self._create_worktree,
            DeleteWorktree: self._delete_worktree,
            RenameBranch: self._rename_branch,
        }

    def dispatch(self, command):
        """Run one command and return its completion message.

        Raises:
            ValueError: For terminal commands, which the entry loop handles
        """
        if isinstance(command, TERMINAL_COMMANDS):
            raise ValueError(f"{type(command).__name__} is handled by the entry loop")
        handler = self._handlers.get(type(command))
        if handler is None:
            raise ValueError(f"Unknown command: {command!r}")
        logger.debug(f"Dispatching {command}")
        return handler(command)

    def _check_repository(self, command: CheckRepository) -> RepositoryChecked:
        try:
            if not self.keeper.is_repository():
                return RepositoryChecked(is_repository=False)
            return RepositoryChecked(is_repository=True, first_run_done=self.keeper.is_first_run_done())
        except Exception as e:
            # A failed check reads as "no repository", which offers git init
            logger.error(f"Repository check failed: {e}")
            return RepositoryChecked(is_repository=False)

    def _load_worktrees(self, command: LoadWorktrees) -> WorktreesLoaded:
        try:
            worktrees = tuple(self.keeper.list_worktrees())
            summary = self.keeper.repository_summary()
        except Exception as e:
            logger.error(f"Failed to load worktrees: {e}")
            return WorktreesLoaded(error=str(e))
        logger.debug(f"Loaded {len(worktrees)} worktrees")
        return WorktreesLoaded(worktrees=worktrees, summary=summary)

    def _fetch_commit_detail(self, command: FetchCommitDetail) -> CommitDetailLoaded:
        try:
            detail = self.keeper.get_commit_detail(command.worktree_path, command.commit_hash)
        except Exception as e:
            logger.error(f"Failed to load commit {command.commit_hash}: {e}")
            return CommitDetailLoaded(commit_hash=command.commit_hash, error=str(e))
        return CommitDetailLoaded(commit_hash=command.commit_hash, detail=detail)

    def _fetch_pr_status(self, command: FetchPRStatus) -> PRStatusFetched:
        # Best effort: any failure reads as "no PR"
        try:
            badge = self.keeper.get_pr_status(command.branch)
        except Exception as e:
            logger.debug(f"PR lookup for {command.branch} failed: {e}")
            badge = None
        return PRStatusFetched(branch=command.branch, badge=badge)

    def _initialize_repository(self, command: InitializeRepository) -> RepositoryInitialized:
        try:
            self.keeper.initialize_repository()
        except Exception as e:
            logger.error(f"git init failed: {e}")
            return RepositoryInitialized(error=str(e))
        return RepositoryInitialized()

    def _complete_first_run(self, command: CompleteFirstRun) -> FirstRunCompleted:
        error = None
        if command.install_shell:
            try:
                self.keeper.install_shell_integration()
            except Exception as e:
                logger.error(f"Shell integration failed: {e}")
                error = str(e)
        # The prompt is answered either way
        try:
            self.keeper.mark_first_run_done()
        except Exception as e:
            logger.error(f"Could not write first-run marker: {e}")
            error = error or str(e)
        return FirstRunCompleted(error=error)

    def _create_worktree(self, command: CreateWorktree) -> WorktreeCreated:
        try:
            self.keeper.create_worktree(
                command.branch,
                display_name=command.display_name,
                description=command.description,
            )
        except Exception as e:
            logger.error(f"Failed to create worktree for {command.branch}: {e}")
            return WorktreeCreated(branch=command.branch, error=str(e))
        return WorktreeCreated(branch=command.branch)

    def _delete_worktree(self, command: DeleteWorktree) -> WorktreeDeleted:
        try:
            self.keeper.delete_worktree(command.path, command.branch or None)
        except Exception as e:
            logger.error(f"Failed to delete worktree {command.path}: {e}")
            return WorktreeDeleted(path=command.path, error=str(e))
        return WorktreeDeleted(path=command.path)

    def _rename_branch(self, command: RenameBranch) -> BranchRenamed:
        try:
            self.keeper.rename_branch(command.old_name, command.new_name)
        except Exception as e:
            logger.error(f"Failed to rename {command.old_name}: {e}")
            return BranchRenamed(command.old_name, command.new_name, error=str(e))
        return BranchRenamed(command.old_name, command.new_name)
