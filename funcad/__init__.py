"""Parsing front end for the funcad formula language."""

__version__ = "0.1.0"
