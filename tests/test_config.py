"""Tests for Config"""
import pytest

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import BRANCH_TYPES


class TestConfigDefaults:
    """Test default values."""

    def test_defaults(self, monkeypatch, tmp_path):
        """Test defaults for a bare Config."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        config = Config(repo_path="/repo")
        assert config.worktree_dir_name == ".wt"
        assert config.branch_types == BRANCH_TYPES
        assert config.github_token is None
        assert config.marker_path == str(tmp_path / "git-worktree-keeper" / "integrated")
        assert config.cd_path_file.endswith(".wt_cd_path")

    def test_branch_types_not_shared(self):
        """Test each Config gets its own branch type list."""
        first = Config(repo_path="/repo")
        first.branch_types.append("spike")
        assert "spike" not in Config(repo_path="/repo").branch_types


class TestConfigValidation:
    """Test validation in __post_init__."""

    @pytest.mark.parametrize("kwargs", [
        {"repo_path": "  "},
        {"worktree_dir_name": "a/b"},
        {"worktree_dir_name": ".."},
        {"branch_types": []},
        {"branch_types": ["feat", " "]},
        {"commit_limit": 0},
    ])
    def test_invalid_values(self, kwargs):
        """Test invalid values raise ValueError."""
        values = {"repo_path": "/repo"}
        values.update(kwargs)
        with pytest.raises(ValueError):
            Config(**values)

    def test_values_are_stripped(self):
        """Test surrounding whitespace is removed."""
        config = Config(repo_path=" /repo ", worktree_dir_name=" trees ")
        assert config.repo_path == "/repo"
        assert config.worktree_dir_name == "trees"


class TestConfigDict:
    """Test dict conversion."""

    def test_from_dict_ignores_unknown_keys(self, mock_config):
        """Test unknown keys are dropped."""
        mock_config['unknown'] = True
        config = Config.from_dict(mock_config)
        assert config.shell == "/bin/zsh"
        assert config.get('unknown', 'fallback') == 'fallback'

    def test_round_trip(self, config):
        """Test to_dict feeds back into from_dict."""
        assert Config.from_dict(config.to_dict()) == config
