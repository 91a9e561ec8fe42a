"""Manager modules for KidsTasks integration.

Managers orchestrate workflows and coordinate between engines and the store.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .approval_manager import (
    ApprovalManager,
    InvalidParentPinError,
    ParentPasswordTooShortError,
)
from .base_manager import BaseManager
from .ledger_manager import DuplicateCatalogIdError, LedgerManager
from .reset_manager import ResetManager
from .sync_manager import SyncManager, SyncSession

__all__ = [
    "ApprovalManager",
    "BaseManager",
    "DuplicateCatalogIdError",
    "InvalidParentPinError",
    "LedgerManager",
    "ParentPasswordTooShortError",
    "ResetManager",
    "SyncManager",
    "SyncSession",
]
