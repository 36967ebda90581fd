"""Integration tests for the WorktreeKeeper facade"""
import os
from unittest.mock import patch

import pytest

from git_worktree_keeper.core import WorktreeKeeper, display_name_for
from git_worktree_keeper.exceptions import GitOperationError, NoCommitsError, NotARepositoryError
from git_worktree_keeper.models.worktree import WorktreeInfo
from git_worktree_keeper.services.metadata_service import MetadataService, WorktreeMetadata


@pytest.fixture
def keeper(config):
    keeper = WorktreeKeeper(config)
    yield keeper
    keeper.close()


class TestDisplayName:
    """Test the name shown in the list."""

    def test_metadata_name_wins(self):
        """Test a stored display name beats the branch."""
        info = WorktreeInfo("/repo/.wt/feat-auth", "feat/auth", "abc", False)
        assert display_name_for(info, WorktreeMetadata(name="Auth")) == "Auth"
        assert display_name_for(info, WorktreeMetadata(name="")) == "feat/auth"
        assert display_name_for(info, None) == "feat/auth"

    def test_detached_and_bare(self):
        """Test labels for worktrees without a branch."""
        detached = WorktreeInfo("/repo/.wt/x", "", "abc", False, is_detached=True)
        bare = WorktreeInfo("/repo.git", "", "", True, is_bare=True)
        assert display_name_for(detached, None) == "(detached)"
        assert display_name_for(bare, None) == "(bare)"

    def test_directory_fallback(self):
        """Test the directory name is used as a last resort."""
        info = WorktreeInfo("/repo/.wt/mystery/", "", "abc", False)
        assert display_name_for(info, None) == "mystery"


class TestRepository:
    """Test repository-level calls."""

    def test_accepts_dict_config(self, mock_config, git_repo):
        """Test a plain dict is turned into a Config."""
        keeper = WorktreeKeeper(mock_config)
        assert keeper.config.repo_path == mock_config['repo_path']
        assert keeper.is_repository() is True

    def test_initialize_repository(self, keeper, temp_dir):
        """Test git init in an empty directory."""
        (temp_dir / "test_repo").mkdir()
        assert keeper.is_repository() is False
        keeper.initialize_repository()
        assert keeper.is_repository() is True
        assert keeper.has_commits() is False

    def test_summary_without_github(self, keeper, git_repo):
        """Test PR lookup is off without a GitHub remote and token."""
        summary = keeper.repository_summary()
        assert summary.has_commits is True
        assert summary.pr_lookup_available is False
        assert keeper.get_pr_status("main") is None


class TestListWorktrees:
    """Test loading worktree entries."""

    def test_entries_in_order(self, keeper, git_repo_with_worktree):
        """Test the main worktree comes first with linked ones after."""
        entries = keeper.list_worktrees()

        assert [e.branch for e in entries] == ["main", "feat/login"]
        main, linked = entries
        assert main.is_main is True
        assert main.name == "main"
        assert linked.is_main is False
        assert linked.ahead == 1
        assert linked.behind == 0
        assert [c.subject for c in linked.commits] == ["Add login", "Initial commit"]
        assert linked.head_sha == linked.commits[0].short_hash
        assert linked.updated_at

    def test_sequential_in_debug_mode(self, mock_config, git_repo_with_worktree):
        """Test debug mode gives the same result without a thread pool."""
        mock_config['debug'] = True
        keeper = WorktreeKeeper(mock_config)
        with patch('git_worktree_keeper.core.ThreadPoolExecutor') as mock_executor:
            entries = keeper.list_worktrees()
        mock_executor.assert_not_called()
        assert [e.branch for e in entries] == ["main", "feat/login"]

    def test_dirty_counts(self, keeper, git_repo_with_worktree):
        """Test changed and untracked counts per worktree."""
        linked = os.path.join(git_repo_with_worktree.working_dir, ".wt", "feat-login")
        with open(os.path.join(linked, "login.py"), "a") as f:
            f.write("# edited\n")

        entries = keeper.list_worktrees()
        assert entries[1].changed_count == 1
        assert entries[1].is_dirty is True

    def test_metadata_overlay(self, keeper, git_repo_with_worktree):
        """Test stored metadata fills name, description and origin."""
        MetadataService(os.path.join(git_repo_with_worktree.working_dir, ".git")).save(
            "feat/login",
            WorktreeMetadata(name="Login", description="Sign-in flow", created_from="a1a1a1a"),
        )

        linked = keeper.list_worktrees()[1]
        assert linked.name == "Login"
        assert linked.branch == "feat/login"
        assert linked.description == "Sign-in flow"
        assert linked.created_from == "a1a1a1a"

    def test_not_a_repository(self, keeper):
        """Test listing outside a repository raises."""
        with pytest.raises(NotARepositoryError):
            keeper.list_worktrees()


class TestMutations:
    """Test create, rename and delete end to end."""

    def test_create_worktree(self, keeper, git_repo):
        """Test the worktree lands under .wt with its metadata."""
        head = git_repo.head.commit.hexsha

        path = keeper.create_worktree("feat/auth", display_name="Auth", description="Refresh tokens")

        assert path == os.path.join(git_repo.working_dir, ".wt", "feat-auth")
        assert os.path.isdir(path)
        entries = keeper.list_worktrees()
        created = [e for e in entries if e.branch == "feat/auth"][0]
        assert created.name == "Auth"
        assert created.description == "Refresh tokens"
        assert head.startswith(created.created_from)
        # The worktree directory is excluded from the main tree's status
        assert entries[0].untracked_count == 0

    def test_create_without_commits(self, keeper, empty_git_repo):
        """Test creating before the first commit raises NoCommitsError."""
        with pytest.raises(NoCommitsError):
            keeper.create_worktree("feat/auth")

    def test_create_existing_branch(self, keeper, git_repo_with_worktree):
        """Test git's refusal is raised and no metadata is stored."""
        with pytest.raises(GitOperationError):
            keeper.create_worktree("feat/login", display_name="Again")
        metadata = MetadataService(os.path.join(git_repo_with_worktree.working_dir, ".git")).load()
        assert "feat/login" not in metadata

    def test_rename_moves_metadata(self, keeper, git_repo):
        """Test rename keeps the display name on the new branch."""
        keeper.create_worktree("feat/auth", display_name="Auth")

        keeper.rename_branch("feat/auth", "feat/login")

        linked = keeper.list_worktrees()[1]
        assert linked.branch == "feat/login"
        assert linked.name == "Auth"

    def test_delete_keeps_branch(self, keeper, git_repo):
        """Test delete removes the worktree and metadata but not the branch."""
        path = keeper.create_worktree("feat/auth", display_name="Auth")

        keeper.delete_worktree(path, "feat/auth")

        assert not os.path.exists(path)
        assert len(keeper.list_worktrees()) == 1
        assert "feat/auth" in [head.name for head in git_repo.heads]
        assert MetadataService(os.path.join(git_repo.working_dir, ".git")).load() == {}

    def test_commit_detail(self, keeper, git_repo_with_worktree):
        """Test the facade loads a full commit."""
        linked = keeper.list_worktrees()[1]
        detail = keeper.get_commit_detail(linked.path, linked.commits[0].short_hash)
        assert detail.loaded is True
        assert detail.subject == "Add login"


class TestShellIntegration:
    """Test the shell calls of the facade."""

    def test_first_run(self, keeper):
        """Test the marker round trip."""
        assert keeper.is_first_run_done() is False
        keeper.mark_first_run_done()
        assert keeper.is_first_run_done() is True

    def test_record_change_directory(self, keeper, config):
        """Test the cd target file is written."""
        keeper.record_change_directory("/repo/.wt/feat-auth")
        with open(config.cd_path_file) as f:
            assert f.read() == "/repo/.wt/feat-auth"
