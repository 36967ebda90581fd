"""Threading utilities for sizing the worktree loading pool."""

import os
import sys
from typing import Dict, Any


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True on Python 3.13+ with the GIL disabled, False otherwise
    """
    return hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()


def get_optimal_worker_count(job_count: int) -> int:
    """Number of threads used to load job_count worktrees.

    Loading a worktree is a handful of git subprocesses, so the work is
    I/O bound and a few threads per CPU pay off even with the GIL.

    Args:
        job_count: Number of worktrees to load

    Returns:
        Worker count between 1 and job_count
    """
    cpu_count = os.cpu_count() or 1
    if is_free_threading_enabled():
        limit = min(64, cpu_count * 2)
    else:
        limit = min(32, cpu_count + 4)
    return max(1, min(limit, job_count))


def get_threading_info() -> Dict[str, Any]:
    """Threading details printed by --debug."""
    return {
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        "free_threading": is_free_threading_enabled(),
        "cpu_count": os.cpu_count() or 1,
    }
