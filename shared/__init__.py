"""Shared infrastructure: configuration and structured logging."""
