"""Verity: account verification requests behind session authentication."""

__version__ = "0.1.0"
