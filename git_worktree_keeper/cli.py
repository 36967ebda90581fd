"""Command-line interface for git-worktree-keeper"""

import os
import sys
from rich.console import Console
from .args import parse_args
from .core import WorktreeKeeper
from .logging_config import get_log_file, get_logger, setup_logging
from .config import Config

console = Console(stderr=True)
logger = get_logger(__name__)


def main(argv=None):
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    try:
        # The app draws full screen, so both ends must be a terminal
        if not (sys.stdin.isatty() and sys.stdout.isatty()):
            console.print("[red]Error: git-worktree-keeper must be run in an interactive terminal[/red]")
            return 1

        repo_path = os.path.abspath(parsed_args.repo_path or os.getcwd())
        if not os.path.isdir(repo_path):
            console.print(f"[red]Error: not a directory: {repo_path}[/red]")
            return 1

        # Setup logging before creating WorktreeKeeper
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = Config(
            repo_path=repo_path,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug:
            from git_worktree_keeper.utils import get_threading_info
            threading_info = get_threading_info()
            logger.debug(f"Python {threading_info['python_version']}, "
                         f"free-threading: {threading_info['free_threading']}, "
                         f"CPUs: {threading_info['cpu_count']}")
            for key, value in config.to_dict().items():
                if key == "github_token" and value:
                    value = "***"
                logger.debug(f"config {key}: {value}")

        keeper = WorktreeKeeper(config)

        # Import here so --help and --version do not load Textual
        from git_worktree_keeper.tui import WorktreeKeeperApp
        app = WorktreeKeeperApp(keeper)
        app.run()

        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        logger.error(f"Startup failed: {e}", exc_info=True)
        console.print(f"[red]Error: {e}[/red]")
        log_file = get_log_file()
        if log_file is not None:
            console.print(f"[dim]Details in {log_file}[/dim]")
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
