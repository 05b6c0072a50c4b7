"""
Constants for the Sideline match clock.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Sideline Match Clock"

# Game timing
REGULATION_MINUTES = 60
REGULATION_SECONDS = REGULATION_MINUTES * 60
DEFAULT_QUARTER_COUNT = 4
SUPPORTED_QUARTER_COUNTS = (2, 4)

# Friendly labels for different period counts (used for UI hints)
PERIOD_LABELS = {
    2: "Half",
    4: "Quarter",
}

# Playing time fairness
FAIRNESS_THRESHOLD_MINUTES = 2
MAX_SUGGESTIONS = 3

# Goal/assist pairing window used when undoing a goal
ASSIST_LINK_WINDOW_MS = 1000

# Public join codes exclude ambiguous O/0/I/1
PUBLIC_CODE_CHARS = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PUBLIC_CODE_LENGTH = 6
MAX_CODE_GENERATION_ATTEMPTS = 20

# Web server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_LOG_LEVEL = "INFO"
