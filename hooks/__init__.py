"""Narrative hook tracking — lifecycle, prioritization, overdue scan."""

from hooks.lifecycle import (
    HOOK_TRANSITIONS,
    AppliedHookChanges,
    abandon_hook,
    apply_extracted_hooks,
    can_transition,
    find_hooks_by_description,
    get_hook_by_id,
    is_hook_active,
    plant_hook,
    reference_hook,
    resolve_hook,
)
from hooks.overdue import build_hooks_report, format_hooks_for_context, get_overdue_hooks
from hooks.priority import (
    build_hook_search_text,
    build_overdue_hook_map,
    filter_and_sort_hooks,
    get_hook_priority_score,
    get_hooks_current_chapter,
)

__all__ = [
    "HOOK_TRANSITIONS",
    "AppliedHookChanges",
    "abandon_hook",
    "apply_extracted_hooks",
    "can_transition",
    "find_hooks_by_description",
    "get_hook_by_id",
    "is_hook_active",
    "plant_hook",
    "reference_hook",
    "resolve_hook",
    "build_hooks_report",
    "format_hooks_for_context",
    "get_overdue_hooks",
    "build_hook_search_text",
    "build_overdue_hook_map",
    "filter_and_sort_hooks",
    "get_hook_priority_score",
    "get_hooks_current_chapter",
]
