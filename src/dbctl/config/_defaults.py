"""Default configuration values.

DEFAULT_CONFIG is a plain dict so it can be passed straight to deep_merge,
which copies it.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "server": {
        "skip_grant_tables": False,
        "skip_networking": False,
        "lock": False,
    },
    "tools": {
        "search_dirs": [],
    },
    "poll": {
        "max_attempts": 30,
        "interval": 1.0,
        "multiplier": 1.0,
        "max_interval": 30.0,
    },
    "logging": {
        "level": "info",
        "format": "json",
        "max_bytes": 0,
        "backup_count": 3,
    },
}
