"""Redis-backed current-status cache."""
