"""Overdue hook scan, aggregate report, and the hook block for prompts."""

from typing import Iterable, Optional

from hooks.lifecycle import is_hook_active
from hooks.priority import get_hooks_current_chapter
from models.enums import HookImportance, HookStatus, HookType
from models.hook import HooksReport, NarrativeHook, OverdueHookWarning

DEFAULT_REMINDER_THRESHOLD = 10
MAX_CONTEXT_WARNINGS = 5

_IMPORTANCE_ORDER = {
    HookImportance.CRITICAL: 0,
    HookImportance.MAJOR: 1,
    HookImportance.MINOR: 2,
}


def suggest_overdue_action(hook: NarrativeHook, chapters_elapsed: int) -> str:
    if hook.importance == HookImportance.CRITICAL:
        return (
            f"Critical hook unresolved for {chapters_elapsed} chapters. "
            "Must be resolved soon or story coherence may suffer."
        )
    if hook.importance == HookImportance.MAJOR:
        return (
            "Consider resolving this hook in the next few chapters, "
            "or reference it to maintain reader engagement."
        )
    return "Minor hook can be resolved at a natural point or abandoned if no longer relevant."


def _active_hooks(hooks: Iterable[NarrativeHook]) -> list[NarrativeHook]:
    """Active hooks, most important first, then oldest first."""
    return sorted(
        (hook for hook in hooks if is_hook_active(hook.status)),
        key=lambda hook: (_IMPORTANCE_ORDER.get(hook.importance, 3), hook.planted_in_chapter),
    )


def get_overdue_hooks(
    hooks: Iterable[NarrativeHook],
    current_chapter: int,
    threshold: Optional[int] = None,
    default_threshold: int = DEFAULT_REMINDER_THRESHOLD,
) -> list[OverdueHookWarning]:
    """Warnings for active hooks planted at least ``threshold`` chapters ago.

    An explicit ``threshold`` applies to every hook; otherwise each hook's
    own ``reminder_threshold`` is used, falling back to ``default_threshold``.
    """
    warnings = []
    for hook in _active_hooks(hooks):
        reminder = threshold or hook.reminder_threshold or default_threshold
        elapsed = current_chapter - hook.planted_in_chapter
        if elapsed < reminder:
            continue
        warnings.append(OverdueHookWarning(
            hook_id=hook.id,
            description=hook.description,
            planted_chapter=hook.planted_in_chapter,
            chapters_overdue=elapsed - reminder,
            importance=hook.importance,
            suggested_action=suggest_overdue_action(hook, elapsed),
        ))

    return sorted(
        warnings,
        key=lambda w: (_IMPORTANCE_ORDER.get(w.importance, 3), -w.chapters_overdue),
    )


def build_hooks_report(
    hooks: Iterable[NarrativeHook],
    current_chapter: Optional[int] = None,
    default_threshold: int = DEFAULT_REMINDER_THRESHOLD,
) -> HooksReport:
    """Aggregate status counts, resolution stats and overdue hooks."""
    hooks = list(hooks)
    by_status = {status: 0 for status in HookStatus}
    hooks_by_type: dict[str, int] = {}
    hooks_by_importance: dict[str, int] = {}
    unresolved_by_importance = {importance.value: 0 for importance in HookImportance}

    for hook in hooks:
        by_status[HookStatus(hook.status)] += 1
        type_key = HookType(hook.type).value
        hooks_by_type[type_key] = hooks_by_type.get(type_key, 0) + 1
        importance_key = HookImportance(hook.importance).value
        hooks_by_importance[importance_key] = hooks_by_importance.get(importance_key, 0) + 1
        if is_hook_active(hook.status):
            unresolved_by_importance[importance_key] += 1

    active = by_status[HookStatus.PLANTED] + by_status[HookStatus.REFERENCED]
    resolved = by_status[HookStatus.RESOLVED]
    abandoned = by_status[HookStatus.ABANDONED]

    divisor = len(hooks) - abandoned
    resolution_rate = resolved / divisor if divisor > 0 else 0.0

    distances = [
        hook.resolved_in_chapter - hook.planted_in_chapter
        for hook in hooks
        if hook.status == HookStatus.RESOLVED and hook.resolved_in_chapter
    ]
    average_distance = sum(distances) / len(distances) if distances else 0.0

    if current_chapter is None:
        current_chapter = get_hooks_current_chapter(hooks)
    by_id = {hook.id: hook for hook in hooks}
    overdue = [
        by_id[warning.hook_id]
        for warning in get_overdue_hooks(hooks, current_chapter, default_threshold=default_threshold)
        if warning.hook_id in by_id
    ]

    return HooksReport(
        total_planted=active,
        total_resolved=resolved,
        total_unresolved=active,
        total_abandoned=abandoned,
        resolution_rate=resolution_rate,
        average_resolution_chapters=average_distance,
        overdue_hooks=overdue,
        hooks_by_type=hooks_by_type,
        hooks_by_importance=hooks_by_importance,
        unresolved_by_importance=unresolved_by_importance,
    )


def format_hooks_for_context(
    hooks: Iterable[NarrativeHook],
    current_chapter: int,
    threshold: Optional[int] = None,
    default_threshold: int = DEFAULT_REMINDER_THRESHOLD,
) -> str:
    """Markdown list of unresolved hooks for the chapter-generation prompt."""
    hooks = list(hooks)
    active = _active_hooks(hooks)
    if not active:
        return ""

    warnings = get_overdue_hooks(hooks, current_chapter, threshold, default_threshold=default_threshold)
    overdue_ids = {warning.hook_id for warning in warnings}

    lines = ["## Unresolved Narrative Hooks"]
    for hook in active:
        prefix = "[OVERDUE] " if hook.id in overdue_ids else ""
        if hook.importance == HookImportance.CRITICAL:
            prefix += "[CRITICAL] "
        elif hook.importance == HookImportance.MAJOR:
            prefix += "[MAJOR] "
        lines.append(f"- {prefix}{hook.description} (Ch.{hook.planted_in_chapter})")

    if warnings:
        lines.append("")
        lines.append("### Overdue Hook Warnings")
        for warning in warnings[:MAX_CONTEXT_WARNINGS]:
            lines.append(f"- {warning.description}: {warning.suggested_action}")

    return "\n".join(lines)
