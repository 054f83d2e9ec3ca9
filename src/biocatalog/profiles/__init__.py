"""User profiles domain package."""
