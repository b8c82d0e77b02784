"""Continuity package — signal collection, gate scoring, config resolution, prompt context."""

from continuity.context import (
    build_chapter_continuity_context,
    build_continuity_rules,
    build_recent_chapter_anchors,
    build_summary_continuity_highlights,
)
from continuity.gate import (
    assess_chapter_continuity,
    detect_continuity_issues,
    has_timeline_cue,
    resolve_verdict,
    vacuous_pass_assessment,
)
from continuity.gate_config import resolve_continuity_gate_config
from continuity.signals import (
    collect_anchor_signals,
    collect_event_signals,
    collect_hook_signals,
    collect_unresolved_hooks,
)

__all__ = [
    "build_chapter_continuity_context",
    "build_continuity_rules",
    "build_recent_chapter_anchors",
    "build_summary_continuity_highlights",
    "assess_chapter_continuity",
    "detect_continuity_issues",
    "has_timeline_cue",
    "resolve_verdict",
    "vacuous_pass_assessment",
    "resolve_continuity_gate_config",
    "collect_anchor_signals",
    "collect_event_signals",
    "collect_hook_signals",
    "collect_unresolved_hooks",
]
