"""Tests for MetadataService"""
import json

import pytest

from git_worktree_keeper.services.metadata_service import MetadataService, WorktreeMetadata


@pytest.fixture
def service(temp_dir):
    return MetadataService(str(temp_dir / ".git"))


class TestMetadataStorage:
    """Test reading and writing the metadata file."""

    def test_missing_file_is_empty(self, service):
        """Test a repository without metadata loads as empty."""
        assert service.load() == {}
        assert "feat/auth" not in service.load()

    def test_save_and_load(self, service, temp_dir):
        """Test an entry is stored under its branch in the common dir."""
        entry = WorktreeMetadata(name="Auth", description="Refresh tokens", created_from="a1a1a1a")
        service.save("feat/auth", entry)

        assert service.load()["feat/auth"] == entry
        path = temp_dir / ".git" / "worktree-keeper" / "meta.json"
        assert service.metadata_file == path
        assert json.loads(path.read_text()) == {
            "feat/auth": {"name": "Auth", "description": "Refresh tokens", "createdFrom": "a1a1a1a"},
        }

    def test_save_replaces_entry(self, service):
        """Test saving twice keeps the last entry."""
        service.save("feat/auth", WorktreeMetadata(name="Old"))
        service.save("feat/auth", WorktreeMetadata(name="New"))
        assert service.load()["feat/auth"].name == "New"
        assert len(service.load()) == 1

    def test_delete(self, service):
        """Test delete drops one entry and ignores unknown branches."""
        service.save("feat/a", WorktreeMetadata(name="A"))
        service.save("feat/b", WorktreeMetadata(name="B"))

        service.delete("feat/a")
        service.delete("feat/unknown")

        assert set(service.load()) == {"feat/b"}

    def test_rename(self, service):
        """Test metadata follows a renamed branch."""
        entry = WorktreeMetadata(name="Auth")
        service.save("feat/auth", entry)

        service.rename("feat/auth", "feat/login")
        service.rename("feat/missing", "feat/other")

        assert service.load() == {"feat/login": entry}

    def test_no_temp_file_left(self, service):
        """Test the atomic write cleans up after itself."""
        service.save("feat/auth", WorktreeMetadata(name="Auth"))
        assert not service.metadata_file.with_suffix('.tmp').exists()


class TestMetadataRobustness:
    """Test damaged or foreign metadata files."""

    def test_corrupt_json_is_empty(self, service):
        """Test invalid JSON reads as empty."""
        service.metadata_file.parent.mkdir(parents=True)
        service.metadata_file.write_text("{not json")
        assert service.load() == {}

    def test_non_object_is_empty(self, service):
        """Test a JSON list reads as empty."""
        service.metadata_file.parent.mkdir(parents=True)
        service.metadata_file.write_text("[1, 2]")
        assert service.load() == {}

    def test_partial_entries(self, service):
        """Test missing keys default to empty strings and bad entries are skipped."""
        service.metadata_file.parent.mkdir(parents=True)
        service.metadata_file.write_text(json.dumps({
            "feat/a": {"name": "A"},
            "feat/b": "not an object",
            "feat/c": {"createdFrom": None},
        }))
        metadata = service.load()
        assert metadata["feat/a"] == WorktreeMetadata(name="A")
        assert "feat/b" not in metadata
        assert metadata["feat/c"].created_from == ""

    def test_write_failure_is_logged(self, temp_dir):
        """Test a failed write does not raise."""
        blocker = temp_dir / "blocker"
        blocker.write_text("a file where the directory should be")
        service = MetadataService(str(blocker))
        service.save("feat/auth", WorktreeMetadata(name="Auth"))
        assert service.load() == {}
