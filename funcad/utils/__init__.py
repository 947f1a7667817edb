"""Shared helpers used across funcad packages."""
