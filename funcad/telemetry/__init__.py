"""Convenience exports for funcad telemetry utilities."""

from . import logger

__all__ = ["logger"]
