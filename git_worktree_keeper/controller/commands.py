"""Commands issued by the state machine.

A command describes one external operation. The dispatcher runs it on a
worker and answers with exactly one completion message; ChangeDirectory and
Quit end the program and are handled by the entry loop.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckRepository:
    pass


@dataclass(frozen=True)
class LoadWorktrees:
    pass


@dataclass(frozen=True)
class FetchCommitDetail:
    worktree_path: str
    commit_hash: str


@dataclass(frozen=True)
class FetchPRStatus:
    branch: str


@dataclass(frozen=True)
class InitializeRepository:
    pass


@dataclass(frozen=True)
class CompleteFirstRun:
    install_shell: bool


@dataclass(frozen=True)
class CreateWorktree:
    display_name: str
    branch: str
    description: str = ""


@dataclass(frozen=True)
class DeleteWorktree:
    branch: str
    path: str


@dataclass(frozen=True)
class RenameBranch:
    old_name: str
    new_name: str


@dataclass(frozen=True)
class ChangeDirectory:
    path: str


@dataclass(frozen=True)
class Quit:
    pass


TERMINAL_COMMANDS = (ChangeDirectory, Quit)
