"""Continuity context blocks for generation and repair prompts."""

from continuity.signals import coerce_chapters, coerce_summaries, collect_unresolved_hooks
from tools.text_utils import extract_ending_snippet, to_string_list

_CONTINUITY_RULES = [
    "## 连续性硬约束（必须遵守）",
    "1. 时间线必须紧接上一章结尾，不得无解释跳时空或跳地点。",
    "2. 角色认知、关系、伤势、装备与能力需延续前文，若变化必须给出因果。",
    "3. 已埋设但未回收的线索要么推进、要么明确延后计划，不得凭空遗忘。",
    "4. 本章冲突与目标应承接前文主线，不引入与既有设定冲突的新规则。",
    "5. 若与历史章节信息冲突，优先以前文事实为准并在文内做合理修正。",
]


def build_recent_chapter_anchors(chapters, limit: int = 6) -> str:
    """List the ending state of the last ``limit`` chapters, oldest first."""
    selected = sorted(coerce_chapters(chapters), key=lambda c: c.order)[-limit:] if limit > 0 else []
    if not selected:
        return ""

    lines = ["### 近章承接锚点"]
    for chapter in selected:
        title = (chapter.title or "").strip() or f"第{chapter.order}章"
        ending = extract_ending_snippet(chapter.content or "")
        if ending:
            lines.append(f"- 第{chapter.order}章《{title}》结尾状态：{ending}")
        else:
            lines.append(f"- 第{chapter.order}章《{title}》：需承接上一章冲突与人物状态。")
    return "\n".join(lines)


def build_summary_continuity_highlights(summaries, limit: int = 12) -> str:
    """Summarize the recent event chain, character changes and open hooks."""
    selected = sorted(
        coerce_summaries(summaries), key=lambda s: s.chapter_number, reverse=True
    )[:max(0, limit)]
    if not selected:
        return ""

    event_lines: list[str] = []
    character_lines: list[str] = []

    for summary in selected:
        number = summary.chapter_number
        key_events = to_string_list(summary.key_events)[:2]
        developments = to_string_list(summary.character_developments)[:2]

        if key_events:
            event_lines.append(f"- 第{number}章：{'；'.join(key_events)}")
        elif summary.one_line and summary.one_line.strip():
            event_lines.append(f"- 第{number}章：{summary.one_line.strip()}")

        if developments:
            character_lines.append(f"- 第{number}章：{'；'.join(developments)}")

    lines = ["### 历史连续性要点"]
    if event_lines:
        lines.append("关键事件链：")
        lines.extend(reversed(event_lines[:6]))
    if character_lines:
        lines.append("角色状态变化：")
        lines.extend(reversed(character_lines[:6]))
    unresolved = collect_unresolved_hooks(selected)
    if unresolved:
        lines.append(f"未回收线索：{'；'.join(unresolved[:8])}")
    return "\n".join(lines)


def build_continuity_rules() -> str:
    return "\n".join(_CONTINUITY_RULES)


def build_chapter_continuity_context(chapters, summaries) -> str:
    """Combined history block; empty when there is no history at all."""
    sections = [
        section
        for section in (
            build_recent_chapter_anchors(chapters),
            build_summary_continuity_highlights(summaries),
        )
        if section
    ]
    if not sections:
        return ""
    return "\n\n".join(["## 多章节连续性上下文", *sections])
