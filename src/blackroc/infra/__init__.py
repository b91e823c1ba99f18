"""Database-backed implementations of the backend contracts."""
