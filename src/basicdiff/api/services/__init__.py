"""Service layer for Basic Diff API."""

from .diff import DiffService

__all__ = ["DiffService"]
