"""Shell integration: the wt() wrapper, first-run marker and cd target file."""
import os
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from git_worktree_keeper.constants import PROGRAM_NAME, SHELL_FUNCTION_NAME
from git_worktree_keeper.exceptions import ShellIntegrationError
from git_worktree_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_worktree_keeper.config import Config

logger = get_logger(__name__)

SHELL_RC_FILES = {
    "zsh": ".zshrc",
    "bash": ".bashrc",
}


class ShellService:
    """Service for the shell side of "switch to worktree".

    A program cannot change its parent shell's directory, so the selected
    path is written to a file that a small shell function reads after the
    program exits.
    """

    def __init__(self, config: Union['Config', dict]):
        self.config = config
        self.marker_path = Path(config.get("marker_path"))
        self.cd_path_file = Path(config.get("cd_path_file"))

    def is_first_run_done(self) -> bool:
        """Whether the shell setup prompt has already been answered."""
        return self.marker_path.exists()

    def mark_first_run_done(self) -> None:
        """Write the marker so the setup prompt is not shown again.

        Raises:
            ShellIntegrationError: If the marker cannot be written
        """
        try:
            self.marker_path.parent.mkdir(parents=True, exist_ok=True)
            self.marker_path.write_text("1", encoding="utf-8")
            logger.debug(f"Wrote first-run marker {self.marker_path}")
        except OSError as e:
            raise ShellIntegrationError(f"Could not write {self.marker_path}: {e}")

    def _detect_shell(self) -> str:
        return self.config.get("shell") or os.environ.get("SHELL", "")

    def rc_file_for(self, shell: str) -> Optional[Path]:
        """Profile file the wrapper goes into, or None for unsupported shells."""
        for name, rc_file in SHELL_RC_FILES.items():
            if name in shell:
                return Path.home() / rc_file
        return None

    def shell_function_snippet(self) -> str:
        """The wrapper function appended to the user's shell profile."""
        cd_file = str(self.cd_path_file)
        return (
            f"\n# {PROGRAM_NAME} shell integration\n"
            f"{SHELL_FUNCTION_NAME}() {{\n"
            f'  {PROGRAM_NAME} "$@"\n'
            f'  if [ -f "{cd_file}" ]; then\n'
            f'    cd "$(cat "{cd_file}")"\n'
            f'    rm "{cd_file}"\n'
            f"  fi\n"
            f"}}\n"
        )

    def install_shell_integration(self) -> Path:
        """Append the wrapper function to ~/.zshrc or ~/.bashrc.

        Returns:
            The profile file that was written

        Raises:
            ShellIntegrationError: For unsupported shells or write failures
        """
        shell = self._detect_shell()
        rc_file = self.rc_file_for(shell)
        if rc_file is None:
            raise ShellIntegrationError(f"unsupported shell: {shell or 'unknown'}")

        try:
            with open(rc_file, "a", encoding="utf-8") as f:
                f.write(self.shell_function_snippet())
        except OSError as e:
            raise ShellIntegrationError(f"Could not update {rc_file}: {e}")

        logger.info(f"Installed {SHELL_FUNCTION_NAME}() shell integration in {rc_file}")
        return rc_file

    def record_change_directory(self, path: str) -> None:
        """Write the directory the shell wrapper should switch to.

        Raises:
            ShellIntegrationError: If the file cannot be written
        """
        try:
            self.cd_path_file.write_text(path, encoding="utf-8")
            logger.debug(f"Recorded cd target {path} in {self.cd_path_file}")
        except OSError as e:
            raise ShellIntegrationError(f"Could not write {self.cd_path_file}: {e}")
