"""Repair prompt and block message for the continuity gate."""

from models.continuity import ContinuityAssessment

MAX_PROMPT_ISSUES = 5
MAX_MESSAGE_ISSUES = 3

_FALLBACK_ISSUE = "1. 承接前文不充分，请补强时间线与事件链衔接。"
_FALLBACK_REASON = "与前文承接不足"

_REWRITE_INSTRUCTIONS = [
    "请在保留本章核心事件和人物关系的前提下重写全文：",
    "1. 开篇必须明确承接上一章结尾状态（时间、地点、冲突或人物状态）。",
    "2. 对近章关键事件链至少体现延续或反馈，不得像新开一章。",
    "3. 未回收线索至少推进一项，或给出清晰延后理由。",
    "4. 输出完整章节正文，不要解释、不要列提纲。",
]


def _format_score(score: float) -> str:
    return f"{score:g}"


def build_repair_prompt(
    chapter_order: int,
    base_prompt: str,
    draft_content: str,
    assessment: ContinuityAssessment,
    continuity_context: str = "",
    continuity_rules: str = "",
) -> str:
    """Prompt asking the generator to rewrite a draft that failed the gate.

    Empty sections are dropped entirely, including the blank spacer lines.
    """
    if assessment.issues:
        issue_lines = "\n".join(
            f"{index}. [{issue.severity.value}] {issue.message}"
            for index, issue in enumerate(assessment.issues[:MAX_PROMPT_ISSUES], start=1)
        )
    else:
        issue_lines = _FALLBACK_ISSUE

    parts = [
        base_prompt,
        "",
        continuity_context,
        continuity_rules,
        "",
        "## 当前草稿（待修复）",
        draft_content,
        "",
        f"## 连续性修复任务（第{chapter_order}章）",
        f"当前连续性得分：{_format_score(assessment.score)}，判定：{assessment.verdict.value}",
        issue_lines,
        "",
        *_REWRITE_INSTRUCTIONS,
    ]
    return "\n".join(part for part in parts if part)


def build_gate_error_message(assessment: ContinuityAssessment) -> str:
    """User-facing message for a chapter the gate blocked."""
    reason = "；".join(issue.message for issue in assessment.issues[:MAX_MESSAGE_ISSUES])
    return (
        f"连续性门禁未通过（得分 {_format_score(assessment.score)}）：{reason or _FALLBACK_REASON}。"
        "请补充章节任务卡或迭代反馈后重试。"
    )
