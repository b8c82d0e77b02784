"""Narrative hook data models."""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from models.chapter import _pick, _to_int, _to_list, _to_optional_str
from models.enums import HookImportance, HookStatus, HookType, coerce_enum


@dataclass
class NarrativeHook:
    """A tracked foreshadowing/promise/mystery thread."""
    id: str = ""
    type: HookType = HookType.FORESHADOWING
    description: str = ""
    status: HookStatus = HookStatus.PLANTED
    importance: HookImportance = HookImportance.MINOR
    planted_in_chapter: int = 0
    referenced_in_chapters: list[int] = field(default_factory=list)
    resolved_in_chapter: Optional[int] = None
    notes: Optional[str] = None
    related_characters: list[str] = field(default_factory=list)
    planted_context: Optional[str] = None
    resolution_context: Optional[str] = None
    reminder_threshold: Optional[int] = None  # Per-hook overdue threshold (chapters)

    @classmethod
    def from_dict(cls, data: Mapping) -> "NarrativeHook":
        resolved = _pick(data, "resolved_in_chapter", "resolvedInChapter")
        threshold = _pick(data, "reminder_threshold", "reminderThreshold")
        return cls(
            id=str(data.get("id", "") or ""),
            type=coerce_enum(HookType, data.get("type"), HookType.FORESHADOWING),
            description=_to_optional_str(data.get("description")) or "",
            status=coerce_enum(HookStatus, data.get("status"), HookStatus.PLANTED),
            importance=coerce_enum(HookImportance, data.get("importance"), HookImportance.MINOR),
            planted_in_chapter=_to_int(_pick(data, "planted_in_chapter", "plantedInChapter")),
            referenced_in_chapters=[
                _to_int(ch) for ch in _to_list(_pick(data, "referenced_in_chapters", "referencedInChapters"))
            ],
            resolved_in_chapter=_to_int(resolved) if resolved is not None else None,
            notes=_to_optional_str(data.get("notes")),
            related_characters=[
                c for c in _to_list(_pick(data, "related_characters", "relatedCharacters"))
                if isinstance(c, str)
            ],
            planted_context=_to_optional_str(_pick(data, "planted_context", "plantedContext")),
            resolution_context=_to_optional_str(_pick(data, "resolution_context", "resolutionContext")),
            reminder_threshold=_to_int(threshold) if threshold is not None else None,
        )


@dataclass
class OverdueHookWarning:
    """Derived flag that an active hook has outlived its reminder window."""
    hook_id: str = ""
    description: str = ""
    planted_chapter: int = 0
    chapters_overdue: int = 0
    importance: HookImportance = HookImportance.MINOR
    suggested_action: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> "OverdueHookWarning":
        return cls(
            hook_id=str(_pick(data, "hook_id", "hookId", default="") or ""),
            description=_to_optional_str(data.get("description")) or "",
            planted_chapter=_to_int(_pick(data, "planted_chapter", "plantedChapter")),
            chapters_overdue=_to_int(_pick(data, "chapters_overdue", "chaptersOverdue")),
            importance=coerce_enum(HookImportance, data.get("importance"), HookImportance.MINOR),
            suggested_action=_to_optional_str(_pick(data, "suggested_action", "suggestedAction")) or "",
        )


@dataclass
class PlantedHookInput:
    """A newly planted hook detected in a chapter."""
    type: HookType = HookType.FORESHADOWING
    description: str = ""
    context: Optional[str] = None
    importance: HookImportance = HookImportance.MINOR
    related_characters: list[str] = field(default_factory=list)


@dataclass
class HookMention:
    """A reference to (or resolution of) an existing hook, by description."""
    hook_description: str = ""
    context: Optional[str] = None


@dataclass
class ExtractedHooks:
    """Hook activity extracted from one chapter by the authoring pipeline."""
    planted: list[PlantedHookInput] = field(default_factory=list)
    referenced: list[HookMention] = field(default_factory=list)
    resolved: list[HookMention] = field(default_factory=list)


@dataclass
class HooksReport:
    """Aggregate hook statistics for a novel."""
    total_planted: int = 0
    total_resolved: int = 0
    total_unresolved: int = 0
    total_abandoned: int = 0
    resolution_rate: float = 0.0
    average_resolution_chapters: float = 0.0
    overdue_hooks: list[NarrativeHook] = field(default_factory=list)
    hooks_by_type: dict[str, int] = field(default_factory=dict)
    hooks_by_importance: dict[str, int] = field(default_factory=dict)
    unresolved_by_importance: dict[str, int] = field(
        default_factory=lambda: {"critical": 0, "major": 0, "minor": 0}
    )
