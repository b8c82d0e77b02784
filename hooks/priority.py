"""Hook prioritization, search and filtering for hook listings."""

from typing import Iterable, Mapping, Optional

from hooks.lifecycle import is_hook_active
from models.enums import HookImportance, HookStatus
from models.hook import NarrativeHook, OverdueHookWarning

IMPORTANCE_WEIGHT = {
    HookImportance.CRITICAL: 300,
    HookImportance.MAJOR: 200,
    HookImportance.MINOR: 100,
}

STATUS_WEIGHT = {
    HookStatus.PLANTED: 40,
    HookStatus.REFERENCED: 35,
    HookStatus.RESOLVED: 10,
    HookStatus.ABANDONED: 0,
}

OVERDUE_BASE_WEIGHT = 1000
OVERDUE_PER_CHAPTER_WEIGHT = 25
ACTIVE_WEIGHT = 60
AGE_WEIGHT_CEILING = 200

ALL_TAB = "all"


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _enum_text(value) -> str:
    return value.value if hasattr(value, "value") else str(value or "")


def build_hook_search_text(hook: NarrativeHook) -> str:
    """Lowercased description, notes, type, importance and character names."""
    parts = [
        hook.description,
        hook.notes or "",
        _enum_text(hook.type),
        _enum_text(hook.importance),
        *(hook.related_characters or []),
    ]
    return " ".join(text for text in (_normalize(part) for part in parts) if text)


def build_overdue_hook_map(warnings: Iterable[OverdueHookWarning]) -> dict[str, OverdueHookWarning]:
    """Index warnings by hook id, keeping the first warning per hook."""
    overdue_map: dict[str, OverdueHookWarning] = {}
    for warning in warnings:
        if warning is None or not warning.hook_id:
            continue
        overdue_map.setdefault(warning.hook_id, warning)
    return overdue_map


def get_hooks_current_chapter(hooks: Iterable[NarrativeHook]) -> int:
    """Furthest chapter any hook mentions, at least 1."""
    latest = 0
    for hook in hooks:
        latest = max(
            latest,
            hook.planted_in_chapter or 0,
            hook.resolved_in_chapter or 0,
            max(hook.referenced_in_chapters or [0]),
        )
    return max(1, latest)


def get_hook_priority_score(
    hook: NarrativeHook,
    overdue_map: Optional[Mapping[str, OverdueHookWarning]] = None,
) -> int:
    """Additive urgency score; any overdue hook outranks every non-overdue one."""
    overdue = (overdue_map or {}).get(hook.id)
    overdue_weight = (
        OVERDUE_BASE_WEIGHT + overdue.chapters_overdue * OVERDUE_PER_CHAPTER_WEIGHT if overdue else 0
    )
    active_weight = ACTIVE_WEIGHT if is_hook_active(hook.status) else 0
    importance_weight = IMPORTANCE_WEIGHT.get(hook.importance, 0)
    status_weight = STATUS_WEIGHT.get(hook.status, 0)
    age_weight = max(0, AGE_WEIGHT_CEILING - (hook.planted_in_chapter or 0))

    return overdue_weight + active_weight + importance_weight + status_weight + age_weight


def filter_and_sort_hooks(
    hooks: Iterable[NarrativeHook],
    active_tab: str = ALL_TAB,
    search_query: str = "",
    overdue_map: Optional[Mapping[str, OverdueHookWarning]] = None,
) -> list[NarrativeHook]:
    """Filter by status tab and search text, most urgent first.

    Args:
        hooks: Hooks to list.
        active_tab: A HookStatus value, or ``"all"``.
        search_query: Case-insensitive substring of the hook's search text.
        overdue_map: Output of ``build_overdue_hook_map``.

    Returns:
        New list sorted by descending priority score, then by ascending
        planted chapter.
    """
    query = _normalize(search_query)
    tab = _enum_text(active_tab) or ALL_TAB

    selected = []
    for hook in hooks:
        if tab != ALL_TAB and _enum_text(hook.status) != tab:
            continue
        if query and query not in build_hook_search_text(hook):
            continue
        selected.append(hook)

    return sorted(
        selected,
        key=lambda hook: (-get_hook_priority_score(hook, overdue_map), hook.planted_in_chapter or 0),
    )
