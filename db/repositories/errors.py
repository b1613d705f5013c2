"""
Repository-layer exceptions for account and batch persistence.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base exception for repository failures."""


class UserAlreadyExistsError(RepositoryError):
    """Raised when registering an email that is already taken."""


class UserNotFoundError(RepositoryError):
    """Raised when a referenced user does not exist."""


class BatchNotFoundError(RepositoryError):
    """Raised when a batch is absent or not visible to the caller."""
