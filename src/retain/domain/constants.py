"""Centralized constants for retain.

Scheduler and aggregation thresholds live here so every layer
imports from a single source of truth.
"""

# ---------- Scheduler ----------
DEFAULT_STRENGTH_FACTOR = 2.5
MIN_STRENGTH_FACTOR = 1.3
MIN_QUALITY = 1
MAX_QUALITY = 5
PASSING_QUALITY = 3  # quality >= this counts as recalled
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
LAPSE_INTERVAL_DAYS = 1

# ---------- Progress ----------
MASTERED_REPETITIONS = 5
RECENT_WINDOW_DAYS = 7

# ---------- Analytics ----------
TOP_ITEMS_LIMIT = 5
DIFFICULT_MIN_REVIEWS = 3

# ---------- Identifiers ----------
ITEM_ID_PREFIX = "item_"
