"""Infrastructure layer - Configuration, database and logging."""
