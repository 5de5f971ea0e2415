"""Game launcher: CI release discovery and launcher self-update."""

__version__ = "0.1.0"
