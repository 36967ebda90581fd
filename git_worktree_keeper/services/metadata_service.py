"""Metadata service for storing user-defined worktree details."""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict
from contextlib import contextmanager

from git_worktree_keeper.logging_config import get_logger

# Import fcntl for POSIX file locking (Unix/Linux/macOS)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

logger = get_logger(__name__)

METADATA_DIR_NAME = "worktree-keeper"
METADATA_FILE_NAME = "meta.json"


@dataclass(frozen=True)
class WorktreeMetadata:
    """What the user typed when creating a worktree."""
    name: str = ""
    description: str = ""
    created_from: str = ""  # short SHA of HEAD at creation time

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "createdFrom": self.created_from,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "WorktreeMetadata":
        return cls(
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            created_from=str(data.get("createdFrom") or ""),
        )


class MetadataService:
    """Reads and writes the per-branch metadata file.

    The file lives in the repository's common .git directory, so every
    worktree of the repository sees the same data:
    <git common dir>/worktree-keeper/meta.json
    """

    def __init__(self, common_dir: str):
        """Initialize metadata service for a repository.

        Args:
            common_dir: The .git directory shared by all worktrees
        """
        self.metadata_file = Path(common_dir) / METADATA_DIR_NAME / METADATA_FILE_NAME

    @contextmanager
    def _acquire_lock(self, file_handle, operation: str = "read"):
        """Acquire file lock for metadata operations.

        Args:
            file_handle: Open file handle to lock
            operation: Type of operation ("read" or "write")

        Yields:
            None when lock is acquired
        """
        if not HAS_FCNTL:
            logger.debug("File locking not available on this platform")
            yield
            return

        try:
            # Acquire exclusive lock for writes, shared lock for reads
            lock_type = fcntl.LOCK_EX if operation == "write" else fcntl.LOCK_SH
            fcntl.flock(file_handle.fileno(), lock_type)
            yield
        finally:
            try:
                fcntl.flock(file_handle.fileno(), fcntl.LOCK_UN)
            except Exception as e:
                logger.debug(f"Error releasing lock: {e}")

    def load(self) -> Dict[str, WorktreeMetadata]:
        """Load metadata keyed by branch name.

        A missing, unreadable or corrupt file reads as empty.
        """
        if not self.metadata_file.exists():
            logger.debug("No metadata file found")
            return {}

        try:
            with open(self.metadata_file, 'r', encoding='utf-8') as f:
                with self._acquire_lock(f, operation="read"):
                    data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in metadata file: {e}")
            return {}
        except OSError as e:
            logger.warning(f"Failed to load metadata: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning("Metadata file is not a JSON object, ignoring it")
            return {}

        return {
            branch: WorktreeMetadata.from_dict(entry)
            for branch, entry in data.items()
            if isinstance(entry, dict)
        }

    def _write(self, metadata: Dict[str, WorktreeMetadata]) -> None:
        """Write all metadata using an atomic replace with file locking."""
        try:
            self.metadata_file.parent.mkdir(parents=True, exist_ok=True)

            # Atomic write: write to temp file, then rename
            temp_file = self.metadata_file.with_suffix('.tmp')
            try:
                with open(temp_file, 'w', encoding='utf-8') as f:
                    with self._acquire_lock(f, operation="write"):
                        json.dump(
                            {branch: entry.to_dict() for branch, entry in metadata.items()},
                            f,
                            indent=2,
                        )
                        f.flush()

                # Atomic rename (POSIX systems guarantee atomicity)
                temp_file.replace(self.metadata_file)
                logger.debug(f"Saved metadata for {len(metadata)} branches")
            finally:
                if temp_file.exists():
                    temp_file.unlink()
        except OSError as e:
            logger.warning(f"Failed to save metadata: {e}")

    def save(self, branch: str, entry: WorktreeMetadata) -> None:
        """Store metadata for a branch, replacing any previous entry."""
        metadata = self.load()
        metadata[branch] = entry
        self._write(metadata)

    def delete(self, branch: str) -> None:
        """Drop the metadata of a branch; unknown branches are ignored."""
        metadata = self.load()
        if metadata.pop(branch, None) is not None:
            self._write(metadata)

    def rename(self, old_branch: str, new_branch: str) -> None:
        """Move metadata to a renamed branch."""
        metadata = self.load()
        entry = metadata.pop(old_branch, None)
        if entry is None:
            return
        metadata[new_branch] = entry
        self._write(metadata)
