"""Neoori backend: accounts, profiles and uploads."""

__version__ = "0.1.0"
