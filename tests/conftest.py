"""Pytest fixtures for git-worktree-keeper tests"""
import tempfile
from pathlib import Path
import pytest
import git

from git_worktree_keeper.config import Config
from git_worktree_keeper.controller.state import AppState, ListView
from git_worktree_keeper.models.commit import CommitSummary
from git_worktree_keeper.models.repository import RepoSummary
from git_worktree_keeper.models.worktree import WorktreeEntry


@pytest.fixture(autouse=True)
def no_github_token(monkeypatch):
    """Keep tests from ever talking to the real GitHub API."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve symlinked temp dirs so paths match what git reports
        yield Path(tmpdir).resolve()


@pytest.fixture
def fake_home(temp_dir, monkeypatch):
    """Point HOME at an empty directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def mock_config(temp_dir):
    """Create a configuration dictionary with every path inside temp_dir."""
    return {
        'repo_path': str(temp_dir / "test_repo"),
        'verbose': False,
        'debug': False,
        'github_token': None,
        'marker_path': str(temp_dir / "config" / "git-worktree-keeper" / "integrated"),
        'cd_path_file': str(temp_dir / ".wt_cd_path"),
        'shell': '/bin/zsh',
    }


@pytest.fixture
def config(mock_config):
    """Config object built from mock_config."""
    return Config.from_dict(mock_config)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except Exception:
        pass

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def empty_git_repo(temp_dir):
    """Create a Git repository without any commit."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)
    yield repo
    repo.close()


@pytest.fixture
def git_repo_with_worktree(git_repo):
    """Repository with one linked worktree on feat/login holding an extra commit."""
    repo = git_repo
    worktree_path = Path(repo.working_dir) / ".wt" / "feat-login"
    repo.git.worktree("add", "-b", "feat/login", str(worktree_path), "HEAD")

    worktree_repo = git.Repo(worktree_path)
    (worktree_path / "login.py").write_text("def login():\n    return True\n")
    worktree_repo.index.add(["login.py"])
    worktree_repo.index.commit("Add login\n\nFirst cut of the login flow.")
    worktree_repo.close()

    yield repo


def make_entry(name, **kwargs):
    """Build a WorktreeEntry with sensible defaults."""
    defaults = {
        'path': f"/repo/.wt/{name.replace('/', '-')}",
        'branch': name,
        'updated_at': "2 hours ago",
        'head_sha': "abc1234",
    }
    defaults.update(kwargs)
    return WorktreeEntry(name=name, **defaults)


@pytest.fixture
def sample_commits():
    """Three commits, newest first."""
    return (
        CommitSummary("c3c3c3c", "Wire up refresh tokens", "1 hour ago"),
        CommitSummary("b2b2b2b", "Add login form", "3 hours ago"),
        CommitSummary("a1a1a1a", "Initial commit", "2 days ago"),
    )


@pytest.fixture
def sample_worktrees(sample_commits):
    """Main worktree plus two linked ones."""
    return (
        make_entry("main", path="/repo", is_main=True, commits=sample_commits[2:]),
        make_entry(
            "feat/auth",
            description="Refresh token support",
            created_from="a1a1a1a",
            ahead=2,
            commits=sample_commits,
            changed_count=2,
            untracked_count=1,
        ),
        make_entry("fix/typo", behind=3),
    )


@pytest.fixture
def sample_summary():
    """Summary of a GitHub-hosted repository with commits."""
    return RepoSummary(
        remote_url="github.com/acme/repo",
        stash_count=1,
        fetched_ago="5m ago",
        default_branch="main",
        has_commits=True,
        pr_lookup_available=True,
    )


@pytest.fixture
def list_state(sample_worktrees, sample_summary):
    """State in List mode with worktrees loaded and a 100x30 viewport."""
    return AppState(
        view=ListView(),
        worktrees=sample_worktrees,
        summary=sample_summary,
        width=100,
        height=30,
    )
