"""Vote Arena - Pairwise-comparison leaderboard engine.

Anonymous voters pick the better of two candidates in a capability
category; every candidate carries an ELO rating per category and overall.

Example:
    ```python
    from vote_arena import Leaderboard

    board = Leaderboard()
    await board.initialize()
    await board.vote("gpt-4o", "deepseek-v3", winner="gpt-4o", category="debugging")
    print(board.has_voted("deepseek-v3", "gpt-4o", "debugging"))  # True
    ```
"""

from .arena import Leaderboard
from .catalog import Catalog, load_bundled_catalog
from .config import Config, LeaderboardConfig, StorageKeys
from .exceptions import (
    ConfigError,
    DuplicateVoteError,
    HourlyQuotaExceededError,
    InvalidCategoryError,
    InvalidVoteError,
    InvalidWinnerError,
    LocalStateCorruptError,
    RateLimitError,
    RatingPersistError,
    RemoteReadError,
    RemoteStoreError,
    RemoteWriteError,
    SelfPairingError,
    TooFrequentError,
    UnknownCandidateError,
    VoteArenaError,
)
from .identity import IdentityProvider
from .ledger import VotedPairs, VoteLedger, pair_key
from .models import (
    AppError,
    Candidate,
    CandidateChange,
    Category,
    RateLimitState,
    RatingChange,
    RatingKey,
    Ratings,
    SyncState,
    VoteRecord,
)
from .ratelimit import RateLimiter
from .remote import InMemoryRemoteStore, RemoteStore, get_remote_store
from .reporter import ErrorLog, ErrorReporter, LoggingErrorReporter
from .scorer import ELO, RatingEngine
from .storage import InMemoryStorage, JsonFileStorage, KeyValueStore
from .sync import SyncCoordinator
from .validator import VoteValidator

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0"  # fallback for editable installs without build

__all__ = [
    # Main entry point
    "Leaderboard",
    # Configuration
    "Config",
    "LeaderboardConfig",
    "StorageKeys",
    # Core models
    "Candidate",
    "Category",
    "RatingKey",
    "Ratings",
    "VoteRecord",
    "RatingChange",
    "RateLimitState",
    "CandidateChange",
    "SyncState",
    "AppError",
    # Engine components
    "Catalog",
    "load_bundled_catalog",
    "IdentityProvider",
    "RateLimiter",
    "VoteValidator",
    "ELO",
    "RatingEngine",
    "VoteLedger",
    "VotedPairs",
    "pair_key",
    "SyncCoordinator",
    # Collaborators
    "RemoteStore",
    "InMemoryRemoteStore",
    "get_remote_store",
    "KeyValueStore",
    "InMemoryStorage",
    "JsonFileStorage",
    "ErrorReporter",
    "ErrorLog",
    "LoggingErrorReporter",
    # Exceptions
    "VoteArenaError",
    "ConfigError",
    "InvalidVoteError",
    "UnknownCandidateError",
    "InvalidCategoryError",
    "InvalidWinnerError",
    "SelfPairingError",
    "DuplicateVoteError",
    "RateLimitError",
    "TooFrequentError",
    "HourlyQuotaExceededError",
    "RemoteStoreError",
    "RemoteReadError",
    "RemoteWriteError",
    "RatingPersistError",
    "LocalStateCorruptError",
]
