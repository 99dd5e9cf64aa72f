"""Observability – structured logging and diagnostic events."""
