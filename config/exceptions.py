"""Custom exception hierarchy for the continuity gate and hook tracking."""

from typing import Optional


class NovelGateError(Exception):
    """Base exception for all continuity gate errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# ---- Hook Errors ----

class HookError(NovelGateError):
    """Base exception for narrative hook errors."""


class HookNotFoundError(HookError):
    """No hook exists with the requested id."""

    def __init__(self, hook_id: str):
        super().__init__(f"Hook not found: {hook_id}", {"hook_id": hook_id})
        self.hook_id = hook_id


class InvalidHookTransitionError(HookError):
    """Requested status change is not allowed by the hook lifecycle."""

    def __init__(self, hook_id: str, from_status: str, to_status: str):
        super().__init__(
            f"Hook {hook_id} cannot move from {from_status} to {to_status}",
            {"hook_id": hook_id, "from": from_status, "to": to_status},
        )
        self.hook_id = hook_id
        self.from_status = from_status
        self.to_status = to_status


# ---- Workflow Errors ----

class WorkflowError(NovelGateError):
    """Base exception for repair-loop orchestration errors."""


class WorkflowStateError(WorkflowError):
    """Invalid or missing workflow state."""


class RegenerationError(WorkflowError):
    """The injected chapter regenerator failed during a repair pass."""

    def __init__(self, message: str = "Chapter regeneration failed", attempt: Optional[int] = None):
        details = {"attempt": attempt} if attempt is not None else {}
        super().__init__(message, details)
        self.attempt = attempt


class ContinuityGateBlockedError(WorkflowError):
    """Chapter was rejected by the continuity gate after all repair attempts."""

    def __init__(self, message: str, chapter: int, score: float, issues: Optional[list] = None):
        super().__init__(message, {"chapter": chapter, "score": score})
        self.chapter = chapter
        self.score = score
        self.issues = list(issues or [])


# ---- Validation Errors ----

class ValidationError(NovelGateError):
    """Input validation failed."""


class InvalidInputError(ValidationError):
    """Input file is unreadable or does not have the expected shape."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Invalid input {source}: {reason}", {"source": source})
        self.source = source
        self.reason = reason
