"""Signal collection from prior chapters, chapter summaries, and hook descriptions."""

from collections.abc import Iterable, Mapping
from typing import Any

from models.chapter import ChapterRef, ChapterSummaryRef
from tools.text_utils import extract_ending_snippet, split_into_signals, to_string_list

ANCHOR_CHAPTER_COUNT = 2
ANCHOR_ENDING_CHARS = 240
EVENT_SUMMARY_COUNT = 8
EVENTS_PER_SUMMARY = 2


def coerce_chapters(chapters: Any) -> list[ChapterRef]:
    """Accept ChapterRef objects or mappings; drop anything else."""
    if not isinstance(chapters, Iterable) or isinstance(chapters, (str, bytes, Mapping)):
        return []
    result = []
    for item in chapters:
        if isinstance(item, ChapterRef):
            result.append(item)
        elif isinstance(item, Mapping):
            result.append(ChapterRef.from_dict(item))
    return result


def coerce_summaries(summaries: Any) -> list[ChapterSummaryRef]:
    """Accept ChapterSummaryRef objects or mappings; drop anything else."""
    if not isinstance(summaries, Iterable) or isinstance(summaries, (str, bytes, Mapping)):
        return []
    result = []
    for item in summaries:
        if isinstance(item, ChapterSummaryRef):
            result.append(item)
        elif isinstance(item, Mapping):
            result.append(ChapterSummaryRef.from_dict(item))
    return result


def _dedupe(signals: list[str], limit: int) -> list[str]:
    return list(dict.fromkeys(signals))[:max(0, limit)]


def collect_unresolved_hooks(summaries: list[ChapterSummaryRef]) -> list[str]:
    """Hook descriptions still open after scanning summaries newest-to-oldest.

    Planted and referenced descriptions are added, resolved ones removed.
    Hooks are correlated by exact description text, so a resolution
    recorded in a newer chapter is undone if an older chapter planted the
    same text.
    """
    unresolved: dict[str, None] = {}
    for summary in sorted(summaries, key=lambda s: s.chapter_number, reverse=True):
        for hook in to_string_list(summary.hooks_planted):
            unresolved[hook] = None
        for hook in to_string_list(summary.hooks_referenced):
            unresolved[hook] = None
        for hook in to_string_list(summary.hooks_resolved):
            unresolved.pop(hook, None)
    return list(unresolved)


def collect_anchor_signals(chapters: list[ChapterRef], max_signals: int) -> list[str]:
    """Signals from the endings of the two most recent chapters."""
    recent = sorted(chapters, key=lambda c: c.order)[-ANCHOR_CHAPTER_COUNT:]

    signals: list[str] = []
    for chapter in recent:
        ending = extract_ending_snippet(chapter.content or "", ANCHOR_ENDING_CHARS)
        signals.extend(split_into_signals(ending, max_signals))
        if len(signals) >= max_signals:
            break

    return _dedupe(signals, max_signals)


def collect_event_signals(summaries: list[ChapterSummaryRef], max_signals: int) -> list[str]:
    """Signals from the key events of the most recent summaries.

    Each summary contributes its first two key events, or its one-line
    digest when it has no key events.
    """
    recent = sorted(summaries, key=lambda s: s.chapter_number, reverse=True)[:EVENT_SUMMARY_COUNT]

    signals: list[str] = []
    for summary in recent:
        sources = to_string_list(summary.key_events)[:EVENTS_PER_SUMMARY]
        if not sources and isinstance(summary.one_line, str) and summary.one_line.strip():
            sources = [summary.one_line.strip()]

        for text in sources:
            signals.extend(split_into_signals(text, max_signals))
            if len(signals) >= max_signals:
                break
        if len(signals) >= max_signals:
            break

    return _dedupe(signals, max_signals)


def collect_hook_signals(summaries: list[ChapterSummaryRef], max_signals: int) -> list[str]:
    """Signals from the descriptions of hooks that are still unresolved."""
    signals: list[str] = []
    for hook in collect_unresolved_hooks(summaries)[:max(0, max_signals)]:
        signals.extend(split_into_signals(hook, max_signals))
        if len(signals) >= max_signals:
            break

    return _dedupe(signals, max_signals)
