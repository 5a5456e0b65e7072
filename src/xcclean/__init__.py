"""xcclean — Xcode storage cleaner CLI."""

__version__ = "1.0.0"
