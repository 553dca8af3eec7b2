"""Cross-cutting concerns: configuration and logging."""
