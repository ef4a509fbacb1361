"""
Group/question synchronization and persistence interfaces.
"""

from .store import InMemoryPartStore, PartNotFoundError, PartStore
from .submission import SubmissionError, validate_submission
from .synchronizer import DeleteResult, GroupSynchronizer, NumberingConflictError

__all__ = [
    "DeleteResult",
    "GroupSynchronizer",
    "InMemoryPartStore",
    "NumberingConflictError",
    "PartNotFoundError",
    "PartStore",
    "SubmissionError",
    "validate_submission",
]
