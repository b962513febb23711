"""Shared helpers: logging, error messages, key casing and retries."""
