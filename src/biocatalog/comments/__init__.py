"""Per-species comment threads."""
