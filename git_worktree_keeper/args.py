"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from git_worktree_keeper.__version__ import __version__
from git_worktree_keeper.constants import PROGRAM_NAME, SHELL_FUNCTION_NAME


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Browse, create, rename and delete the git worktrees of a repository",
        epilog=f"PR badges need a GITHUB_TOKEN environment variable. "
        f"Answer 'y' to the first-run prompt to install the {SHELL_FUNCTION_NAME}() shell "
        f"function, which switches to the selected worktree on exit.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"{PROGRAM_NAME} {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "-C",
        dest="repo_path",
        metavar="PATH",
        default=None,
        help="Run as if started in PATH instead of the current directory",
    )

    return parser.parse_args(argv)
