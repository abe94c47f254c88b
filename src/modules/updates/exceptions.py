"""System update domain exceptions."""

from __future__ import annotations


class SystemUpdateNotFound(Exception):
    """The requested system update does not exist."""
