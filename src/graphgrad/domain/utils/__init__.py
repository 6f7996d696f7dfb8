"""Domain-level shared utilities."""
