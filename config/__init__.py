"""Configuration package — settings, logging, and exceptions."""

from config.exceptions import (
    NovelGateError,
    HookError,
    HookNotFoundError,
    InvalidHookTransitionError,
    WorkflowError,
    WorkflowStateError,
    RegenerationError,
    ContinuityGateBlockedError,
    ValidationError,
    InvalidInputError,
)
from config.logging_config import setup_logging
from config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "NovelGateError",
    "HookError",
    "HookNotFoundError",
    "InvalidHookTransitionError",
    "WorkflowError",
    "WorkflowStateError",
    "RegenerationError",
    "ContinuityGateBlockedError",
    "ValidationError",
    "InvalidInputError",
]
