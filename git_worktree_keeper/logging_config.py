"""Logging configuration for git-worktree-keeper

The app draws over the whole terminal, so log records never go to stderr:
they are written to a file that is overwritten on every run.
"""
import logging
from pathlib import Path
from typing import Optional

LOG_DIR = Path.home() / '.git-worktree-keeper'
LOG_FILE_NAME = 'git-worktree-keeper.log'

# Third-party loggers that are chatty at DEBUG level; the git services'
# own loggers (git.operations, git.worktrees, ...) are not among them
NOISY_LOGGERS = ('git.cmd', 'git.repo', 'git.config', 'git.util', 'github', 'urllib3', 'asyncio')

_log_file: Optional[Path] = None


def setup_logging(verbose: bool = False, debug: bool = False, log_dir: Optional[Path] = None) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: If True, write INFO level messages
        debug: If True, write DEBUG level messages, including GitPython's
            and PyGithub's own
        log_dir: Directory for the log file, defaults to ~/.git-worktree-keeper

    Returns:
        Path of the log file
    """
    global _log_file

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    target_dir = log_dir or LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    _log_file = target_dir / LOG_FILE_NAME

    file_handler = logging.FileHandler(_log_file, mode='w', encoding='utf-8')  # Overwrite each run
    if debug:
        fmt = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'
    else:
        fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    file_handler.setFormatter(logging.Formatter(fmt=fmt, datefmt='%Y-%m-%d %H:%M:%S'))
    root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    return _log_file


def get_log_file() -> Optional[Path]:
    """The file setup_logging() writes to, or None before it ran."""
    return _log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Args:
        name: Name of the module (typically __name__)

    Returns:
        Logger instance
    """
    # Strip the package prefix for cleaner log names
    if name.startswith('git_worktree_keeper.'):
        name = name.replace('git_worktree_keeper.', '', 1)
    if name.startswith('services.'):
        name = name.replace('services.', '', 1)

    return logging.getLogger(name)
