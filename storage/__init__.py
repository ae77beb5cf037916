"""Local storage backends for the scan console."""

from .case_repository import (
    CaseRepository,
    StorageError,
    CaseNotFoundError,
    ScoutNotAvailableError,
)

__all__ = [
    'CaseRepository',
    'StorageError',
    'CaseNotFoundError',
    'ScoutNotAvailableError',
]
