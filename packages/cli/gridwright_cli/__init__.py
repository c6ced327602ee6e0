"""Gridwright CLI: lay out and lint architecture diagrams from the terminal."""

__version__ = "0.1.0"
