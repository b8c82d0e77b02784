"""Enumerations for hook tracking and continuity assessment."""

from enum import Enum


class HookType(str, Enum):
    FORESHADOWING = "foreshadowing"
    CHEKHOV_GUN = "chekhov_gun"
    MYSTERY = "mystery"
    PROMISE = "promise"
    SETUP = "setup"


class HookStatus(str, Enum):
    PLANTED = "planted"
    REFERENCED = "referenced"
    RESOLVED = "resolved"
    ABANDONED = "abandoned"


class HookImportance(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class IssueType(str, Enum):
    OPENING_ANCHOR = "opening_anchor"
    EVENT_CHAIN = "event_chain"
    HOOK_PROGRESS = "hook_progress"
    TIMELINE = "timeline"


class IssueSeverity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class Verdict(str, Enum):
    PASS = "pass"
    REVISE = "revise"
    REJECT = "reject"


def coerce_enum(enum_cls, value, default):
    """Return ``enum_cls(value)``, or ``default`` when the value is not a member."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return default
