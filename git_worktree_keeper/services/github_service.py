"""GitHub API integration service"""
import os
from typing import Optional, TYPE_CHECKING, Union
from urllib.parse import urlparse

from github import Github, Auth, GithubException

from git_worktree_keeper.exceptions import GitHubAPIError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.pull_request import PRBadge, PRState

if TYPE_CHECKING:
    from github.PullRequest import PullRequest
    from github.Repository import Repository
    from git_worktree_keeper.config import Config

logger = get_logger(__name__)


def parse_github_repo(remote_url: str) -> Optional[str]:
    """Extract "org/repo" from a GitHub remote URL.

    Returns:
        "org/repo", or None when the remote is not on github.com
    """
    if "github.com" not in remote_url:
        return None

    if remote_url.startswith("git@"):
        # Handle SSH URL format (git@github.com:org/repo.git)
        path = remote_url.split("github.com:", 1)[1]
    else:
        # Handle HTTPS URL format (https://github.com/org/repo.git)
        parsed_url = urlparse(remote_url)
        path = parsed_url.path.strip("/")

    if path.endswith(".git"):
        path = path[:-4]
    return path or None


def badge_for_pull(pull: "PullRequest") -> PRBadge:
    """Turn a PyGithub pull request into a badge; merged beats closed."""
    if pull.merged:
        state = PRState.MERGED
    elif pull.state == "closed":
        state = PRState.CLOSED
    else:
        state = PRState.OPEN
    return PRBadge(state=state, number=pull.number, url=pull.html_url or "")


class GitHubService:
    def __init__(self, repo_path: str, config: Union['Config', dict]):
        """Initialize the service."""
        self.repo_path = repo_path
        self.config = config
        self.debug_mode = config.get('debug', False)
        self.github_token = config.get("github_token") or os.environ.get("GITHUB_TOKEN")
        self.github_repo: Optional[str] = None
        self.github_enabled = False
        self.github: Optional[Github] = None
        self.gh_repo: Optional['Repository'] = None

    def setup_github_api(self, remote_url: str) -> None:
        """Setup GitHub API access.

        The repository itself is fetched on the first lookup, so setup does
        no network I/O and leaves the service disabled when the remote is
        not on GitHub or no token is configured.
        """
        self.github_repo = parse_github_repo(remote_url) if remote_url else None
        if not self.github_repo:
            if self.debug_mode:
                logger.debug("[GitHub] Not a GitHub repository")
            self.github_enabled = False
            return

        if not self.github_token:
            if self.debug_mode:
                logger.debug("[GitHub] No GitHub token found. PR badges disabled")
            self.github_enabled = False
            return

        self.github = Github(auth=Auth.Token(self.github_token))
        self.github_enabled = True
        logger.debug(f"[GitHub] GitHub integration enabled for: {self.github_repo}")

    def is_available(self) -> bool:
        """Whether PR lookups can be attempted."""
        return self.github_enabled

    def _get_gh_repo(self) -> 'Repository':
        if self.gh_repo is None:
            assert self.github is not None and self.github_repo is not None
            self.gh_repo = self.github.get_repo(self.github_repo)
            logger.debug(f"[GitHub] GitHub API URL: {self.gh_repo.url}")
        return self.gh_repo

    def fetch_pr(self, branch_name: str) -> Optional[PRBadge]:
        """Look up the most recent PR whose head is branch_name.

        Returns:
            Badge of the newest PR, or None when the branch has none

        Raises:
            GitHubAPIError: If the API call fails
        """
        if not self.github_enabled:
            return None

        try:
            gh_repo = self._get_gh_repo()
            org_name = self.github_repo.split('/')[0]
            pulls = list(gh_repo.get_pulls(state='all', head=f"{org_name}:{branch_name}"))
        except GithubException as e:
            raise GitHubAPIError("get_pulls", f"{branch_name}: {e}")

        if not pulls:
            return None

        latest_pr = max(pulls, key=lambda pr: pr.created_at)
        badge = badge_for_pull(latest_pr)
        if self.debug_mode:
            logger.debug(f"[GitHub] Branch {branch_name} has {badge.state.value} PR #{badge.number}")
        return badge

    def get_pr_status(self, branch_name: str) -> Optional[PRBadge]:
        """Best-effort PR lookup: failures are logged and read as "no PR"."""
        try:
            return self.fetch_pr(branch_name)
        except GitHubAPIError as e:
            logger.debug(f"[GitHub] {e}")
            return None
        except Exception as e:
            logger.debug(f"[GitHub] Error getting PR status for {branch_name}: {e}")
            return None

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        if self.github:
            try:
                self.github.close()
                logger.debug("[GitHub] Closed GitHub API connection")
            except Exception as e:
                logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")
