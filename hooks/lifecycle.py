"""Narrative hook lifecycle: transition rules and status mutations.

Every mutation returns an updated copy and leaves the input untouched, so
callers decide when (and where) to persist.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Optional

from config.exceptions import HookNotFoundError, InvalidHookTransitionError, ValidationError
from models.enums import HookImportance, HookStatus, HookType
from models.hook import ExtractedHooks, NarrativeHook

logger = logging.getLogger(__name__)

HOOK_TRANSITIONS: dict[HookStatus, frozenset[HookStatus]] = {
    HookStatus.PLANTED: frozenset({HookStatus.REFERENCED, HookStatus.RESOLVED, HookStatus.ABANDONED}),
    HookStatus.REFERENCED: frozenset({HookStatus.REFERENCED, HookStatus.RESOLVED, HookStatus.ABANDONED}),
    HookStatus.RESOLVED: frozenset(),
    HookStatus.ABANDONED: frozenset(),
}

ACTIVE_STATUSES = frozenset({HookStatus.PLANTED, HookStatus.REFERENCED})


def is_hook_active(status) -> bool:
    """Planted and referenced hooks are still waiting for a payoff."""
    return status in ACTIVE_STATUSES


def can_transition(from_status, to_status) -> bool:
    try:
        return HookStatus(to_status) in HOOK_TRANSITIONS.get(HookStatus(from_status), frozenset())
    except ValueError:
        return False


def _ensure_transition(hook: NarrativeHook, to_status: HookStatus) -> None:
    if not can_transition(hook.status, to_status):
        raise InvalidHookTransitionError(hook.id, HookStatus(hook.status).value, to_status.value)


def plant_hook(
    hook_id: str,
    hook_type,
    description: str,
    planted_in_chapter: int,
    *,
    context: Optional[str] = None,
    importance=HookImportance.MINOR,
    related_characters: Optional[list[str]] = None,
    notes: Optional[str] = None,
    reminder_threshold: Optional[int] = None,
) -> NarrativeHook:
    """Create a new hook in the ``planted`` state.

    Raises:
        ValidationError: empty description, unknown type/importance, or a
            chapter number below 1.
    """
    if not description or not description.strip():
        raise ValidationError("Hook description must not be empty", {"hook_id": hook_id})
    if planted_in_chapter < 1:
        raise ValidationError(
            "planted_in_chapter must be >= 1", {"hook_id": hook_id, "chapter": planted_in_chapter}
        )
    try:
        hook_type = HookType(hook_type)
        importance = HookImportance(importance)
    except ValueError as e:
        raise ValidationError(str(e), {"hook_id": hook_id}) from e

    return NarrativeHook(
        id=hook_id,
        type=hook_type,
        description=description.strip(),
        status=HookStatus.PLANTED,
        importance=importance,
        planted_in_chapter=planted_in_chapter,
        related_characters=list(related_characters or []),
        notes=notes,
        planted_context=context,
        reminder_threshold=reminder_threshold,
    )


def reference_hook(hook: NarrativeHook, chapter: int) -> NarrativeHook:
    """Record a mention in ``chapter``; each chapter is listed once."""
    _ensure_transition(hook, HookStatus.REFERENCED)
    chapters = list(hook.referenced_in_chapters)
    if chapter not in chapters:
        chapters.append(chapter)
    return replace(hook, status=HookStatus.REFERENCED, referenced_in_chapters=chapters)


def resolve_hook(hook: NarrativeHook, chapter: int, context: Optional[str] = None) -> NarrativeHook:
    _ensure_transition(hook, HookStatus.RESOLVED)
    return replace(
        hook,
        status=HookStatus.RESOLVED,
        resolved_in_chapter=chapter,
        resolution_context=context,
    )


def abandon_hook(hook: NarrativeHook, reason: Optional[str] = None) -> NarrativeHook:
    """Drop a hook without payoff; a given reason replaces the notes."""
    _ensure_transition(hook, HookStatus.ABANDONED)
    return replace(hook, status=HookStatus.ABANDONED, notes=reason if reason is not None else hook.notes)


def get_hook_by_id(hooks: Iterable[NarrativeHook], hook_id: str) -> NarrativeHook:
    for hook in hooks:
        if hook.id == hook_id:
            return hook
    raise HookNotFoundError(hook_id)


def find_hooks_by_description(hooks: Iterable[NarrativeHook], text: str) -> list[NarrativeHook]:
    """Hooks whose description contains ``text``, ignoring case."""
    needle = (text or "").strip().lower()
    if not needle:
        return []
    return [hook for hook in hooks if needle in (hook.description or "").lower()]


@dataclass
class AppliedHookChanges:
    """Result of applying one chapter's extracted hook activity."""
    hooks: list[NarrativeHook] = field(default_factory=list)
    planted: list[str] = field(default_factory=list)
    referenced: list[str] = field(default_factory=list)
    resolved: list[str] = field(default_factory=list)


def apply_extracted_hooks(
    hooks: Iterable[NarrativeHook],
    chapter: int,
    extracted: ExtractedHooks,
    id_factory: Callable[[], str],
) -> AppliedHookChanges:
    """Apply planted/referenced/resolved hook activity found in ``chapter``.

    Mentions are matched to existing hooks by case-insensitive description
    substring. Hooks already resolved or abandoned are skipped.

    Args:
        hooks: Current hooks of the novel.
        chapter: Chapter the activity was extracted from.
        extracted: Extracted activity.
        id_factory: Returns a fresh id for each newly planted hook.
    """
    by_id = {hook.id: hook for hook in hooks}
    result = AppliedHookChanges()

    for item in extracted.planted:
        hook = plant_hook(
            id_factory(),
            item.type,
            item.description,
            chapter,
            context=item.context,
            importance=item.importance,
            related_characters=item.related_characters,
        )
        by_id[hook.id] = hook
        result.planted.append(hook.id)

    for mention in extracted.referenced:
        for match in find_hooks_by_description(by_id.values(), mention.hook_description):
            if not is_hook_active(match.status):
                continue
            by_id[match.id] = reference_hook(match, chapter)
            result.referenced.append(match.id)

    for mention in extracted.resolved:
        for match in find_hooks_by_description(by_id.values(), mention.hook_description):
            if not is_hook_active(match.status):
                continue
            by_id[match.id] = resolve_hook(match, chapter, mention.context)
            result.resolved.append(match.id)

    logger.info(
        "Chapter %d hooks: %d planted, %d referenced, %d resolved",
        chapter, len(result.planted), len(result.referenced), len(result.resolved),
    )
    result.hooks = list(by_id.values())
    return result
