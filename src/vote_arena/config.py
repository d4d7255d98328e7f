"""Configuration for Vote Arena.

This module provides the Config class for the voting engine (ELO K-factor,
rate limits, duplicate policy, storage keys) and LeaderboardConfig for
loading a complete setup from YAML.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigError


class StorageKeys(BaseModel):
    """Names under which local state is persisted."""

    voter_id: str = "vote_arena_voter_id"
    voted_pairs: str = "vote_arena_pair_votes"
    last_vote_time: str = "vote_arena_last_vote_time"
    hourly_vote_count: str = "vote_arena_hourly_vote_count"
    hourly_window_start: str = "vote_arena_hourly_window_start"

    @field_validator("*")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Storage keys must be non-empty."""
        if not v.strip():
            raise ValueError("Storage keys must not be empty")
        return v


class Config(BaseModel):
    """Configuration for the voting engine.

    Attributes:
        elo_k_factor: K-factor for ELO rating updates.
        initial_rating: Rating given to candidates that arrive without one.
        min_vote_interval_ms: Minimum delay between two votes.
        hourly_vote_quota: Votes allowed per hourly window.
        hourly_window_ms: Length of the quota window.
        voted_pairs_ttl_days: Lifetime of the locally stored voted-pairs index.
        reject_duplicate_votes: Refuse a second vote on the same pair and category.
        allow_self_pairing: Allow a candidate to be compared with itself.
        seed_remote_catalog: Insert bundled candidates missing from the remote store.
        error_dismiss_ms: Default auto-dismiss delay for reported errors.
        storage_keys: Names of the persisted local keys.
    """

    # Scoring
    elo_k_factor: int = Field(default=32, ge=1, le=100)
    initial_rating: int = Field(default=1000, ge=0)

    # Rate limiting
    min_vote_interval_ms: int = Field(default=1000, ge=0)
    hourly_vote_quota: int = Field(default=50, ge=1)
    hourly_window_ms: int = Field(default=3_600_000, ge=1)

    # Ledger
    voted_pairs_ttl_days: int = Field(default=365, ge=1)
    reject_duplicate_votes: bool = True
    allow_self_pairing: bool = False

    # Sync
    seed_remote_catalog: bool = True

    # Error reporting
    error_dismiss_ms: int | None = Field(default=5000)

    storage_keys: StorageKeys = Field(default_factory=StorageKeys)

    @property
    def voted_pairs_ttl_seconds(self) -> int:
        """TTL of the voted-pairs index in seconds."""
        return self.voted_pairs_ttl_days * 24 * 60 * 60


class LeaderboardConfig(BaseModel):
    """Full leaderboard configuration, typically loaded from YAML.

    Attributes:
        voting: Engine settings (maps to Config).
        storage_path: JSON file for local state. In-memory storage when unset.
        catalog_path: YAML file with the bundled catalog. The packaged
            catalog is used when unset.
    """

    voting: Config = Field(default_factory=Config)
    storage_path: str | None = None
    catalog_path: str | None = None

    def model_post_init(self, __context: Any) -> None:
        """Load the storage path from environment if not provided."""
        if self.storage_path is None:
            self.storage_path = os.environ.get("VOTE_ARENA_STORAGE_PATH")

    @classmethod
    def from_yaml(cls, path: str | Path) -> LeaderboardConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            LeaderboardConfig instance.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ConfigError: If the YAML is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Invalid config file: expected dict, got {type(data).__name__}"
            )

        # Handle nested 'voting' section
        if "voting" in data:
            if not isinstance(data["voting"], dict):
                raise ConfigError("expected a mapping", field="voting")
            data["voting"] = Config(**data["voting"])

        # Relative paths resolve against the config file
        for key in ("storage_path", "catalog_path"):
            value = data.get(key)
            if value and not Path(value).is_absolute():
                data[key] = str(path.parent / value)

        return cls(**data)
