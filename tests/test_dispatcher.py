"""Tests for the command dispatcher"""
from unittest.mock import Mock

import pytest

from git_worktree_keeper.controller.commands import (
    ChangeDirectory,
    CheckRepository,
    CompleteFirstRun,
    CreateWorktree,
    DeleteWorktree,
    FetchCommitDetail,
    FetchPRStatus,
    InitializeRepository,
    LoadWorktrees,
    Quit,
    RenameBranch,
)
from git_worktree_keeper.controller.dispatcher import CommandDispatcher
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
from git_worktree_keeper.exceptions import GitOperationError, ShellIntegrationError
from git_worktree_keeper.models.commit import CommitDetail
from git_worktree_keeper.models.pull_request import PRBadge, PRState


@pytest.fixture
def keeper():
    """A Mock standing in for the WorktreeKeeper facade."""
    return Mock()


@pytest.fixture
def dispatcher(keeper):
    return CommandDispatcher(keeper)


class TestTerminalCommands:
    """Test commands the dispatcher refuses."""

    @pytest.mark.parametrize("command", [Quit(), ChangeDirectory("/repo/.wt/feat-auth")])
    def test_terminal_commands_raise(self, dispatcher, command):
        """Test Quit and ChangeDirectory never reach a handler."""
        with pytest.raises(ValueError):
            dispatcher.dispatch(command)

    def test_unknown_command_raises(self, dispatcher):
        """Test an unknown object is rejected."""
        with pytest.raises(ValueError):
            dispatcher.dispatch(object())


class TestRepositoryCommands:
    """Test repository check and init."""

    def test_check_repository(self, dispatcher, keeper):
        """Test a repository reports its first-run state."""
        keeper.is_repository.return_value = True
        keeper.is_first_run_done.return_value = False
        assert dispatcher.dispatch(CheckRepository()) == RepositoryChecked(is_repository=True, first_run_done=False)

    def test_check_outside_repository(self, dispatcher, keeper):
        """Test the marker is not read outside a repository."""
        keeper.is_repository.return_value = False
        assert dispatcher.dispatch(CheckRepository()) == RepositoryChecked(is_repository=False)
        keeper.is_first_run_done.assert_not_called()

    def test_failed_check_is_no_repository(self, dispatcher, keeper):
        """Test an exception reads as no repository."""
        keeper.is_repository.side_effect = OSError("permission denied")
        assert dispatcher.dispatch(CheckRepository()).is_repository is False

    def test_initialize_repository(self, dispatcher, keeper):
        """Test git init success and failure."""
        assert dispatcher.dispatch(InitializeRepository()) == RepositoryInitialized()

        error = GitOperationError("init", "/repo", "permission denied")
        keeper.initialize_repository.side_effect = error
        assert dispatcher.dispatch(InitializeRepository()).error == str(error)


class TestLoadWorktrees:
    """Test worktree loading."""

    def test_success(self, dispatcher, keeper, sample_worktrees, sample_summary):
        """Test worktrees and summary travel together."""
        keeper.list_worktrees.return_value = list(sample_worktrees)
        keeper.repository_summary.return_value = sample_summary

        message = dispatcher.dispatch(LoadWorktrees())

        assert isinstance(message, WorktreesLoaded)
        assert message.worktrees == sample_worktrees
        assert message.summary == sample_summary
        assert message.error is None

    def test_failure(self, dispatcher, keeper):
        """Test a failure carries only the error."""
        error = GitOperationError("worktree list")
        keeper.list_worktrees.side_effect = error
        message = dispatcher.dispatch(LoadWorktrees())
        assert message == WorktreesLoaded(error=str(error))


class TestFetchCommands:
    """Test commit detail and PR lookups."""

    def test_commit_detail(self, dispatcher, keeper):
        """Test the detail is tagged with the requested hash."""
        detail = CommitDetail("c3c3c3c", "Wire up refresh tokens", loaded=True)
        keeper.get_commit_detail.return_value = detail

        message = dispatcher.dispatch(FetchCommitDetail("/repo/.wt/feat-auth", "c3c3c3c"))

        keeper.get_commit_detail.assert_called_once_with("/repo/.wt/feat-auth", "c3c3c3c")
        assert message == CommitDetailLoaded(commit_hash="c3c3c3c", detail=detail)

    def test_commit_detail_failure(self, dispatcher, keeper):
        """Test a failed fetch keeps the hash and carries the error."""
        error = GitOperationError("show", "deadbee", "bad object")
        keeper.get_commit_detail.side_effect = error
        message = dispatcher.dispatch(FetchCommitDetail("/repo", "deadbee"))
        assert message.commit_hash == "deadbee"
        assert message.detail is None
        assert message.error == str(error)

    def test_pr_status(self, dispatcher, keeper):
        """Test a found PR is passed through."""
        badge = PRBadge(PRState.OPEN, 12)
        keeper.get_pr_status.return_value = badge
        assert dispatcher.dispatch(FetchPRStatus("feat/auth")) == PRStatusFetched("feat/auth", badge)

    def test_pr_status_failure_is_no_pr(self, dispatcher, keeper):
        """Test any lookup failure resolves to no PR."""
        keeper.get_pr_status.side_effect = RuntimeError("rate limited")
        message = dispatcher.dispatch(FetchPRStatus("feat/auth"))
        assert message == PRStatusFetched("feat/auth", None)


class TestFirstRun:
    """Test completing the first-run prompt."""

    def test_accept(self, dispatcher, keeper):
        """Test accepting installs the wrapper and writes the marker."""
        assert dispatcher.dispatch(CompleteFirstRun(install_shell=True)) == FirstRunCompleted()
        keeper.install_shell_integration.assert_called_once()
        keeper.mark_first_run_done.assert_called_once()

    def test_decline(self, dispatcher, keeper):
        """Test declining only writes the marker."""
        dispatcher.dispatch(CompleteFirstRun(install_shell=False))
        keeper.install_shell_integration.assert_not_called()
        keeper.mark_first_run_done.assert_called_once()

    def test_install_failure_still_marks(self, dispatcher, keeper):
        """Test the prompt is answered even when the install fails."""
        error = ShellIntegrationError("unsupported shell: fish")
        keeper.install_shell_integration.side_effect = error
        message = dispatcher.dispatch(CompleteFirstRun(install_shell=True))
        assert message.error == str(error)
        keeper.mark_first_run_done.assert_called_once()

    def test_marker_failure(self, dispatcher, keeper):
        """Test a marker write failure is reported."""
        error = ShellIntegrationError("read-only file system")
        keeper.mark_first_run_done.side_effect = error
        assert dispatcher.dispatch(CompleteFirstRun(install_shell=False)).error == str(error)


class TestMutations:
    """Test create, delete and rename."""

    def test_create(self, dispatcher, keeper):
        """Test the form values are passed to the facade."""
        message = dispatcher.dispatch(CreateWorktree("Auth", "feat/auth", "Refresh tokens"))
        keeper.create_worktree.assert_called_once_with(
            "feat/auth", display_name="Auth", description="Refresh tokens"
        )
        assert message == WorktreeCreated(branch="feat/auth")

    def test_create_failure(self, dispatcher, keeper):
        """Test a failed create carries the branch and the error."""
        error = GitOperationError("worktree add", "feat/auth", "branch already exists")
        keeper.create_worktree.side_effect = error
        message = dispatcher.dispatch(CreateWorktree("Auth", "feat/auth"))
        assert message == WorktreeCreated(branch="feat/auth", error=str(error))

    def test_delete(self, dispatcher, keeper):
        """Test delete passes path and branch."""
        message = dispatcher.dispatch(DeleteWorktree("feat/auth", "/repo/.wt/feat-auth"))
        keeper.delete_worktree.assert_called_once_with("/repo/.wt/feat-auth", "feat/auth")
        assert message == WorktreeDeleted(path="/repo/.wt/feat-auth")

    def test_delete_detached(self, dispatcher, keeper):
        """Test a detached worktree is deleted without a branch."""
        dispatcher.dispatch(DeleteWorktree("", "/repo/.wt/detached"))
        keeper.delete_worktree.assert_called_once_with("/repo/.wt/detached", None)

    def test_delete_failure(self, dispatcher, keeper):
        """Test a failed delete carries the path."""
        error = GitOperationError("worktree remove", "/repo/.wt/feat-auth", "contains modified files")
        keeper.delete_worktree.side_effect = error
        message = dispatcher.dispatch(DeleteWorktree("feat/auth", "/repo/.wt/feat-auth"))
        assert message.path == "/repo/.wt/feat-auth"
        assert message.error == str(error)

    def test_rename(self, dispatcher, keeper):
        """Test rename success and failure."""
        assert dispatcher.dispatch(RenameBranch("feat/auth", "feat/login")) == BranchRenamed("feat/auth", "feat/login")
        keeper.rename_branch.assert_called_once_with("feat/auth", "feat/login")

        error = GitOperationError("branch -m", "feat/auth", "name taken")
        keeper.rename_branch.side_effect = error
        assert dispatcher.dispatch(RenameBranch("feat/auth", "main")).error == str(error)
