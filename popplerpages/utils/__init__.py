"""Shared helpers: logging and structured concurrency."""
