"""termdeck: a project-based terminal workspace manager."""

__version__ = "0.1.0"
