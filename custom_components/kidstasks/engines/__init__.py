"""Engine modules for KidsTasks integration.

Contains specialized computation engines:
- ledger_engine: Completion counts, balances and redemption deductions
- approval_engine: Pending approval state machine
- statistics_engine: Weekly totals and per-day history
- reset_engine: Daily/weekly rollover and history archive
"""

# Use relative imports within package to avoid mypy module resolution issues
from .approval_engine import (
    APPROVAL_ACTION_APPROVE,
    APPROVAL_ACTION_REJECT,
    APPROVAL_ACTION_SUBMIT,
    APPROVAL_ACTION_VERIFY,
    ApprovalEngine,
)
from .ledger_engine import (
    LedgerEngine,
    LedgerEntry,
    RedemptionDeduction,
    TaskCompletion,
)
from .reset_engine import ResetEngine
from .statistics_engine import StatisticsEngine

__all__ = [
    "APPROVAL_ACTION_APPROVE",
    "APPROVAL_ACTION_REJECT",
    "APPROVAL_ACTION_SUBMIT",
    "APPROVAL_ACTION_VERIFY",
    "ApprovalEngine",
    "LedgerEngine",
    "LedgerEntry",
    "RedemptionDeduction",
    "ResetEngine",
    "StatisticsEngine",
    "TaskCompletion",
]
