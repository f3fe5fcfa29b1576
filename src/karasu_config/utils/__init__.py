"""Shared helpers: logging and file writing."""
