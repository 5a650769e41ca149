"""Internal helpers shared by the sync and async containers."""
