"""Game settings, RON files, discovery tracking and dialogue scripting."""

__version__ = "0.1.0"