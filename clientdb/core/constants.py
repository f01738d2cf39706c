"""
Application-wide constants.

Table names, column limits and search modes live here so the models,
the input schemas and the repository agree on them.
"""

from enum import Enum


# ========================================
# Table Names
# ========================================

CLIENTS_TABLE = "clients"
PHONES_TABLE = "phones"

# ========================================
# Column Limits
# ========================================

FIRST_NAME_MAX_LENGTH = 50
LAST_NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 100
PHONE_NUMBER_MAX_LENGTH = 20

# ========================================
# Search Modes
# ========================================

class MatchMode(str, Enum):
    """
    How a search filter is compared against stored values.

    Usage:
        repo.find_clients(last_name="Ivan", match=MatchMode.SUBSTRING)
    """

    EXACT = "exact"
    """Stored value must equal the filter value."""

    SUBSTRING = "substring"
    """Stored value must contain the filter value."""


# ========================================
# SQLSTATE codes
# ========================================

SQLSTATE_UNIQUE_VIOLATION = "23505"
SQLSTATE_FOREIGN_KEY_VIOLATION = "23503"
