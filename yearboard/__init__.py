"""Yearboard: year-scoped student dashboard backend."""
