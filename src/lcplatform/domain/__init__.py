"""Domain layer - the in-memory relational engine's core logic."""
