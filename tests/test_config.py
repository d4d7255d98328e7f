"""Tests for Vote Arena configuration."""

import os
import tempfile

import pytest

from vote_arena import Config, ConfigError, LeaderboardConfig, StorageKeys


class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()
        assert config.elo_k_factor == 32
        assert config.initial_rating == 1000
        assert config.min_vote_interval_ms == 1000
        assert config.hourly_vote_quota == 50
        assert config.hourly_window_ms == 3_600_000
        assert config.voted_pairs_ttl_days == 365
        assert config.reject_duplicate_votes is True
        assert config.allow_self_pairing is False
        assert config.seed_remote_catalog is True

    def test_ttl_seconds(self) -> None:
        assert Config(voted_pairs_ttl_days=1).voted_pairs_ttl_seconds == 86400

    def test_k_factor_bounds(self) -> None:
        """Test K-factor validation."""
        assert Config(elo_k_factor=1).elo_k_factor == 1
        assert Config(elo_k_factor=100).elo_k_factor == 100

        with pytest.raises(ValueError):
            Config(elo_k_factor=0)

        with pytest.raises(ValueError):
            Config(elo_k_factor=101)

    def test_quota_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            Config(hourly_vote_quota=0)

    def test_storage_keys(self) -> None:
        """Storage keys can be renamed but not blanked."""
        config = Config(storage_keys=StorageKeys(voter_id="custom_id"))
        assert config.storage_keys.voter_id == "custom_id"
        assert config.storage_keys.voted_pairs == "vote_arena_pair_votes"

        with pytest.raises(ValueError, match="must not be empty"):
            StorageKeys(voted_pairs="  ")


class TestLeaderboardConfig:
    """Tests for LeaderboardConfig."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("VOTE_ARENA_STORAGE_PATH", raising=False)
        config = LeaderboardConfig()
        assert config.storage_path is None
        assert config.catalog_path is None
        assert config.voting.elo_k_factor == 32

    def test_storage_path_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("VOTE_ARENA_STORAGE_PATH", "/tmp/votes.json")
        assert LeaderboardConfig().storage_path == "/tmp/votes.json"

    def test_from_yaml(self, monkeypatch) -> None:
        """Test loading from YAML file."""
        monkeypatch.delenv("VOTE_ARENA_STORAGE_PATH", raising=False)
        yaml_content = """
catalog_path: /srv/catalog.yaml
voting:
  elo_k_factor: 24
  reject_duplicate_votes: false
  storage_keys:
    voter_id: my_voter
"""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write(yaml_content)
            f.flush()

            try:
                config = LeaderboardConfig.from_yaml(f.name)
                assert config.voting.elo_k_factor == 24
                assert config.voting.reject_duplicate_votes is False
                assert config.voting.storage_keys.voter_id == "my_voter"
                assert config.catalog_path == "/srv/catalog.yaml"
                assert config.storage_path is None
            finally:
                os.unlink(f.name)

    def test_relative_paths_resolve_against_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "arena.yaml")
            with open(path, "w") as f:
                f.write("catalog_path: models.yaml\n")

            config = LeaderboardConfig.from_yaml(path)
            assert config.catalog_path == os.path.join(tmp, "models.yaml")

    def test_empty_yaml(self) -> None:
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("")
        try:
            assert LeaderboardConfig.from_yaml(f.name).voting.hourly_vote_quota == 50
        finally:
            os.unlink(f.name)

    def test_from_yaml_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            LeaderboardConfig.from_yaml("/nonexistent/path.yaml")

    def test_from_yaml_invalid_format(self) -> None:
        """A YAML list is not a valid config."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("- item1\n- item2\n")
        try:
            with pytest.raises(ConfigError, match="expected dict"):
                LeaderboardConfig.from_yaml(f.name)
        finally:
            os.unlink(f.name)

    def test_from_yaml_invalid_voting_section(self) -> None:
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("voting: 12\n")
        try:
            with pytest.raises(ConfigError, match="voting"):
                LeaderboardConfig.from_yaml(f.name)
        finally:
            os.unlink(f.name)
