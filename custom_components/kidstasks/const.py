# File: const.py
"""Constants for the KidsTasks integration.

This file centralizes configuration keys, defaults, storage record keys,
signal names, and service field names for consistency across the integration.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
KIDSTASKS_TITLE = "KidsTasks"

# Integration Domain
DOMAIN = "kidstasks"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms (presentation layers subscribe to the coordinator instead)
PLATFORMS: list[str] = []

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_KEY = "kidstasks_data"
STORAGE_VERSION = 1
STORAGE_SAVE_DELAY_SECONDS = 1

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_SERVER_URL = "server_url"
CONF_TIME_ZONE = "time_zone"
CONF_SYNC_INTERVAL = "sync_interval"

CONFIG_FLOW_STEP_USER = "user"

# Defaults
DEFAULT_TIME_ZONE_NAME = "America/Los_Angeles"
DEFAULT_SYNC_INTERVAL = 5  # seconds
DEFAULT_RESET_CHECK_INTERVAL = 60  # seconds
DEFAULT_REQUEST_TIMEOUT = 10  # seconds
DEFAULT_WEEKLY_HISTORY_LIMIT = 5
DEFAULT_ZERO = 0
MIN_SYNC_INTERVAL = 1
MIN_PARENT_PASSWORD_LENGTH = 4

# ------------------------------------------------------------------------------------------------
# Storage Record Keys (wire-compatible with the shared server file)
# ------------------------------------------------------------------------------------------------
RECORD_KEY_PREFIX = "kidsTaskTracker_"

RECORD_CHILDREN = f"{RECORD_KEY_PREFIX}children"
RECORD_TASKS = f"{RECORD_KEY_PREFIX}tasks"
RECORD_REWARDS = f"{RECORD_KEY_PREFIX}rewards"
RECORD_COMPLETIONS = f"{RECORD_KEY_PREFIX}completions"
RECORD_REDEMPTIONS = f"{RECORD_KEY_PREFIX}redemptions"
RECORD_WEEKLY_STATS = f"{RECORD_KEY_PREFIX}weeklyStats"
RECORD_WEEKLY_HISTORY = f"{RECORD_KEY_PREFIX}weeklyHistory"
RECORD_LAST_DAILY_RESET = f"{RECORD_KEY_PREFIX}lastResetDate"
RECORD_LAST_WEEKLY_RESET = f"{RECORD_KEY_PREFIX}lastReset"
RECORD_PENDING_APPROVALS = f"{RECORD_KEY_PREFIX}pendingApprovals"
RECORD_PARENT_PASSWORD = f"{RECORD_KEY_PREFIX}parentPassword"

# Every record the store knows about, in sync order
RECORD_KEYS: Final[tuple[str, ...]] = (
    RECORD_CHILDREN,
    RECORD_TASKS,
    RECORD_REWARDS,
    RECORD_COMPLETIONS,
    RECORD_REDEMPTIONS,
    RECORD_WEEKLY_STATS,
    RECORD_WEEKLY_HISTORY,
    RECORD_LAST_DAILY_RESET,
    RECORD_LAST_WEEKLY_RESET,
    RECORD_PENDING_APPROVALS,
    RECORD_PARENT_PASSWORD,
)

# Catalog records a parent may replace wholesale
CATALOG_RECORD_KEYS: Final[frozenset[str]] = frozenset(
    {
        RECORD_CHILDREN,
        RECORD_TASKS,
        RECORD_REWARDS,
    }
)

# Records stored as plain strings rather than JSON documents
TEXT_RECORD_KEYS: Final[frozenset[str]] = frozenset(
    {
        RECORD_LAST_DAILY_RESET,
        RECORD_LAST_WEEKLY_RESET,
        RECORD_PARENT_PASSWORD,
    }
)

# ------------------------------------------------------------------------------------------------
# Data Field Keys
# ------------------------------------------------------------------------------------------------
# Catalog entries
DATA_ID = "id"
DATA_NAME = "name"
DATA_EMOJI = "emoji"
DATA_DESCRIPTION = "description"
DATA_TASK_POINTS = "points"
DATA_TASK_REQUIRES_APPROVAL = "requiresApproval"
DATA_REWARD_COST = "cost"
DATA_CHILD_COLOR = "color"
DATA_CHILD_AVATAR = "avatar"

# Reserved ledger entry holding spent points
LEDGER_REDEMPTION_KEY = "redemption"

# Redemption records
DATA_REDEMPTION_ID = "id"
DATA_REDEMPTION_CHILD_ID = "childId"
DATA_REDEMPTION_REWARD_ID = "rewardId"
DATA_REDEMPTION_REWARD_NAME = "rewardName"
DATA_REDEMPTION_COST = "cost"
DATA_REDEMPTION_DATE = "date"

# Weekly stats
DATA_WEEK_START_DATE = "weekStartDate"
DATA_WEEK_CHILDREN = "children"
DATA_WEEK_TASKS_COMPLETED = "tasksCompleted"
DATA_WEEK_POINTS_EARNED = "pointsEarned"
DATA_WEEK_DAILY_HISTORY = "dailyHistory"
DATA_DAY_TASKS = "tasks"
DATA_DAY_POINTS = "points"

# Export / import sections
EXPORT_CHILDREN = "children"
EXPORT_TASKS = "tasks"
EXPORT_REWARDS = "rewards"
EXPORT_COMPLETIONS = "completions"
EXPORT_REDEMPTIONS = "redemptions"
EXPORT_LAST_RESET = "lastReset"

EXPORT_SECTIONS: Final[dict[str, str]] = {
    EXPORT_CHILDREN: RECORD_CHILDREN,
    EXPORT_TASKS: RECORD_TASKS,
    EXPORT_REWARDS: RECORD_REWARDS,
    EXPORT_COMPLETIONS: RECORD_COMPLETIONS,
    EXPORT_REDEMPTIONS: RECORD_REDEMPTIONS,
    EXPORT_LAST_RESET: RECORD_LAST_WEEKLY_RESET,
}

# ------------------------------------------------------------------------------------------------
# Approval States
# ------------------------------------------------------------------------------------------------
APPROVAL_STATE_NONE = "none"
APPROVAL_STATE_PENDING = "pending"
APPROVAL_STATE_COMPLETED = "completed"

# ------------------------------------------------------------------------------------------------
# Event Signals (instance-scoped via get_event_signal)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_DATA_UPDATED = "data_updated"
SIGNAL_SUFFIX_REMOTE_SYNCED = "remote_synced"

# ------------------------------------------------------------------------------------------------
# Remote Sync
# ------------------------------------------------------------------------------------------------
REMOTE_RESPONSE_KEYS_UPDATED = "keysUpdated"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_COMPLETE_TASK = "complete_task"
SERVICE_UNDO_TASK = "undo_task"
SERVICE_SUBMIT_FOR_APPROVAL = "submit_for_approval"
SERVICE_APPROVE_TASK = "approve_task"
SERVICE_REJECT_TASK = "reject_task"
SERVICE_VERIFY_TASK = "verify_task"
SERVICE_REDEEM_REWARD = "redeem_reward"
SERVICE_SET_PARENT_PASSWORD = "set_parent_password"
SERVICE_RESET_DAILY_TASKS = "reset_daily_tasks"
SERVICE_RESET_WEEKLY_STATS = "reset_weekly_stats"
SERVICE_SYNC_NOW = "sync_now"
SERVICE_EXPORT_DATA = "export_data"
SERVICE_IMPORT_DATA = "import_data"
SERVICE_SET_CHILDREN = "set_children"
SERVICE_SET_TASKS = "set_tasks"
SERVICE_SET_REWARDS = "set_rewards"

FIELD_CHILD_ID = "child_id"
FIELD_TASK_ID = "task_id"
FIELD_REWARD_ID = "reward_id"
FIELD_PIN = "pin"
FIELD_PASSWORD = "password"
FIELD_RECONNECT = "reconnect"
FIELD_DATA = "data"
FIELD_WEEK_START = "week_start"
FIELD_CHILDREN = "children"
FIELD_TASKS = "tasks"
FIELD_REWARDS = "rewards"

# ------------------------------------------------------------------------------------------------
# Error Messages / Translation Keys
# ------------------------------------------------------------------------------------------------
ERROR_NO_ENTRY_FOUND = "No KidsTasks entry found"
ERROR_INSUFFICIENT_POINTS_FMT = "Reward '{}' could not be redeemed for child '{}'"
ERROR_INVALID_PIN = "Incorrect PIN. Try again!"
ERROR_PASSWORD_TOO_SHORT_FMT = "Password must be at least {} characters"
ERROR_DUPLICATE_CATALOG_ID_FMT = "Duplicate id in catalog: {}"

TRANS_KEY_ERROR_INVALID_URL = "invalid_url"
TRANS_KEY_ERROR_INVALID_TIMEZONE = "invalid_timezone"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"

# ------------------------------------------------------------------------------------------------
# Default Catalogs (used until a catalog record exists)
# ------------------------------------------------------------------------------------------------
DEFAULT_TASKS: Final[list[dict]] = [
    {
        DATA_ID: "1",
        DATA_NAME: "Make the Bed",
        DATA_TASK_POINTS: 10,
        DATA_EMOJI: "🛏️",
        DATA_DESCRIPTION: "Make your bed nice and neat!",
    },
    {
        DATA_ID: "2",
        DATA_NAME: "Brush Teeth",
        DATA_TASK_POINTS: 5,
        DATA_EMOJI: "🪥",
        DATA_DESCRIPTION: "Brush your teeth morning and night!",
    },
    {
        DATA_ID: "3",
        DATA_NAME: "Clean Up Room",
        DATA_TASK_POINTS: 15,
        DATA_EMOJI: "🧹",
        DATA_DESCRIPTION: "Put away toys and keep room tidy!",
    },
    {
        DATA_ID: "4",
        DATA_NAME: "Play Violin",
        DATA_TASK_POINTS: 20,
        DATA_EMOJI: "🎻",
        DATA_DESCRIPTION: "Practice violin for 15 minutes!",
    },
]

DEFAULT_REWARDS: Final[list[dict]] = [
    {
        DATA_ID: "1",
        DATA_NAME: "Dessert",
        DATA_REWARD_COST: 30,
        DATA_EMOJI: "🍰",
        DATA_DESCRIPTION: "Yummy dessert after dinner!",
    },
    {
        DATA_ID: "2",
        DATA_NAME: "Screen Time",
        DATA_REWARD_COST: 50,
        DATA_EMOJI: "📱",
        DATA_DESCRIPTION: "30 minutes of screen time!",
    },
    {
        DATA_ID: "3",
        DATA_NAME: "Outdoor Play",
        DATA_REWARD_COST: 40,
        DATA_EMOJI: "⚽",
        DATA_DESCRIPTION: "Extra outdoor playtime!",
    },
    {
        DATA_ID: "4",
        DATA_NAME: "Party with Friends",
        DATA_REWARD_COST: 100,
        DATA_EMOJI: "🎉",
        DATA_DESCRIPTION: "Have friends over for a party!",
    },
]

DEFAULT_CHILDREN: Final[list[dict]] = [
    {DATA_ID: "1", DATA_NAME: "Child 1", DATA_CHILD_COLOR: "#FF6B9D", DATA_CHILD_AVATAR: "🦄"},
    {DATA_ID: "2", DATA_NAME: "Child 2", DATA_CHILD_COLOR: "#4ECDC4", DATA_CHILD_AVATAR: "🚀"},
]
