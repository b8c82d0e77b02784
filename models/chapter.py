"""Chapter and chapter-summary references consumed by the continuity gate."""

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


def _pick(data: Mapping, *keys: str, default: Any = None) -> Any:
    """Return the first present key (camelCase or snake_case spelling)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _to_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    return default


def _to_optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _to_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


@dataclass
class ChapterRef:
    """A previously accepted chapter, read-only for the gate."""
    order: int = 0
    title: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "ChapterRef":
        return cls(
            order=_to_int(_pick(data, "order", "chapter_number", "chapterNumber")),
            title=_to_optional_str(data.get("title")),
            content=_to_optional_str(data.get("content")),
        )


@dataclass
class ChapterSummaryRef:
    """Structured digest of one chapter produced by the summarization stage.

    Hook lists hold free-text descriptions, not hook ids.
    """
    chapter_number: int = 0
    one_line: Optional[str] = None
    key_events: list[str] = field(default_factory=list)
    character_developments: list[str] = field(default_factory=list)
    hooks_planted: list[str] = field(default_factory=list)
    hooks_referenced: list[str] = field(default_factory=list)
    hooks_resolved: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping) -> "ChapterSummaryRef":
        return cls(
            chapter_number=_to_int(_pick(data, "chapter_number", "chapterNumber", "order")),
            one_line=_to_optional_str(_pick(data, "one_line", "oneLine")),
            key_events=_to_list(_pick(data, "key_events", "keyEvents")),
            character_developments=_to_list(
                _pick(data, "character_developments", "characterDevelopments")
            ),
            hooks_planted=_to_list(_pick(data, "hooks_planted", "hooksPlanted")),
            hooks_referenced=_to_list(_pick(data, "hooks_referenced", "hooksReferenced")),
            hooks_resolved=_to_list(_pick(data, "hooks_resolved", "hooksResolved")),
        )
