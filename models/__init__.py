"""Models package — dataclasses and enums shared by the gate and hook tracking."""

from models.chapter import ChapterRef, ChapterSummaryRef
from models.continuity import (
    ContinuityAssessment,
    ContinuityGateConfig,
    ContinuityIssue,
    ContinuityMetrics,
    MatchedSignals,
    SignalTotals,
)
from models.hook import (
    ExtractedHooks,
    HookMention,
    HooksReport,
    NarrativeHook,
    OverdueHookWarning,
    PlantedHookInput,
)
from models.enums import (
    HookType,
    HookStatus,
    HookImportance,
    IssueType,
    IssueSeverity,
    Verdict,
)

__all__ = [
    "ChapterRef",
    "ChapterSummaryRef",
    "ContinuityAssessment",
    "ContinuityGateConfig",
    "ContinuityIssue",
    "ContinuityMetrics",
    "MatchedSignals",
    "SignalTotals",
    "ExtractedHooks",
    "HookMention",
    "HooksReport",
    "NarrativeHook",
    "OverdueHookWarning",
    "PlantedHookInput",
    "HookType",
    "HookStatus",
    "HookImportance",
    "IssueType",
    "IssueSeverity",
    "Verdict",
]
