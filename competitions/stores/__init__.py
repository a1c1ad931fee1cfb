"""Event and team stores (repository pattern)."""
