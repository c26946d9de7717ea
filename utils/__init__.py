"""Shared helpers for request validation, errors and time."""
