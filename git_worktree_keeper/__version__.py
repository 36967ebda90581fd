"""Version information for git-worktree-keeper."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("git-worktree-keeper")
except PackageNotFoundError:
    # Fallback when running from source without installing
    __version__ = "0.0.0+unknown"
