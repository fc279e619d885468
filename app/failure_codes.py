"""Shared rejection and failure code constants for the completion sync."""

MISSING_COMPLETION_DATE = "missing_completion_date"
OUTSIDE_WINDOW = "outside_window"
MISSING_DIFFICULTY = "missing_difficulty"
MISSING_PROJECT = "missing_project"
PROJECT_OPTION_OUT_OF_RANGE = "project_option_out_of_range"
EMPTY_PROJECT_NAME = "empty_project_name"
COERCION_FAILED = "coercion_failed"
LEVEL_BELOW_MINIMUM = "level_below_minimum"

# Evaluation order used by the classifier; the first failing check wins.
REJECTION_REASONS = [
    MISSING_COMPLETION_DATE,
    OUTSIDE_WINDOW,
    MISSING_DIFFICULTY,
    MISSING_PROJECT,
    PROJECT_OPTION_OUT_OF_RANGE,
    EMPTY_PROJECT_NAME,
    COERCION_FAILED,
    LEVEL_BELOW_MINIMUM,
]

TRANSPORT_ERROR = "transport_error"
DECODE_ERROR = "decode_error"
PERSISTENCE_ERROR = "persistence_error"

BRANCH_FAILURES = [
    TRANSPORT_ERROR,
    DECODE_ERROR,
    PERSISTENCE_ERROR,
]
