"""Continuity gate: scores how plausibly a candidate chapter continues the story.

Signals are collected from the endings of recent chapters (anchors), the
key events of recent summaries (events) and unresolved hook descriptions
(hooks). Their fuzzy coverage in the candidate produces a weighted score,
rule-based issues, and a pass/revise/reject verdict. The gate is pure and
never raises on malformed input.
"""

import logging
import re
from typing import Optional

from continuity.signals import (
    coerce_chapters,
    coerce_summaries,
    collect_anchor_signals,
    collect_event_signals,
    collect_hook_signals,
)
from models.continuity import (
    ContinuityAssessment,
    ContinuityIssue,
    ContinuityMetrics,
    MatchedSignals,
    SignalTotals,
)
from models.enums import IssueSeverity, IssueType, Verdict
from tools.signal_matcher import MatchResult, match_signals
from tools.text_utils import normalize_whitespace

logger = logging.getLogger(__name__)

DEFAULT_PASS_SCORE = 6.2
DEFAULT_REJECT_SCORE = 4.9
DEFAULT_OPENING_WINDOW_CHARS = 420
DEFAULT_MAX_ANCHOR_SIGNALS = 8
DEFAULT_MAX_EVENT_SIGNALS = 10
DEFAULT_MAX_HOOK_SIGNALS = 8

OPENING_MATCH_WEIGHT = 0.75
TIMELINE_CUE_BONUS = 0.25
OPENING_WEIGHT = 0.45
EVENT_WEIGHT = 0.35
HOOK_WEIGHT = 0.20
BASE_SCORE = 4.0
SCORE_SPAN = 6.0

_CHINESE_CUES = "次日|翌日|当晚|随后|与此同时|同一时间|片刻后|回到|继续|仍然|刚刚|不久后"
_ENGLISH_CUES = (
    r"next (?:day|morning)|the following (?:day|morning)|that night|meanwhile|"
    r"at the same time|shortly after|moments later|back (?:at|in|to)|"
    r"continu(?:e|es|ed|ing)|still|just now|before long"
)
_TIMELINE_CUE_RE = re.compile(rf"(?:{_CHINESE_CUES})|\b(?:{_ENGLISH_CUES})\b", re.IGNORECASE)

_MESSAGES = {
    "empty": "章节内容为空，无法建立与前文的连续性承接。",
    "opening_anchor": "开篇未有效承接前章结尾状态，章节衔接感偏弱。",
    "timeline_cue": "开篇缺少明确时间/场景承接提示，建议补充过渡语句。",
    "event_chain": "对近章关键事件链呼应不足，主线连续性不够清晰。",
    "hook_progress": "未回收线索推进不足，存在钩子被遗忘风险。",
    "break": "章节与历史上下文关联极弱，疑似出现明显断层。",
}


def has_timeline_cue(opening_text: str) -> bool:
    """True when the opening contains a transition phrase (next day, meanwhile, ...)."""
    return bool(_TIMELINE_CUE_RE.search(normalize_whitespace(opening_text)))


def detect_continuity_issues(
    opening_match: MatchResult,
    event_match: MatchResult,
    hook_match: MatchResult,
    opening_coverage: float,
    event_coverage: float,
    hook_coverage: float,
    timeline_cue: bool,
) -> list[ContinuityIssue]:
    """Apply each issue rule independently to the coverage metrics."""
    issues = []

    if opening_match.total >= 2 and opening_coverage < 0.25:
        issues.append(ContinuityIssue(
            IssueType.OPENING_ANCHOR, IssueSeverity.MAJOR, _MESSAGES["opening_anchor"],
        ))

    if not timeline_cue and opening_match.total > 0 and not opening_match.matched:
        issues.append(ContinuityIssue(
            IssueType.TIMELINE, IssueSeverity.MINOR, _MESSAGES["timeline_cue"],
        ))

    if event_match.total >= 4 and event_coverage < 0.2:
        issues.append(ContinuityIssue(
            IssueType.EVENT_CHAIN, IssueSeverity.MAJOR, _MESSAGES["event_chain"],
        ))

    if hook_match.total >= 2 and hook_coverage < 0.2:
        issues.append(ContinuityIssue(
            IssueType.HOOK_PROGRESS, IssueSeverity.MAJOR, _MESSAGES["hook_progress"],
        ))

    if opening_coverage < 0.2 and event_coverage < 0.15 and hook_coverage < 0.15:
        issues.append(ContinuityIssue(
            IssueType.TIMELINE, IssueSeverity.CRITICAL, _MESSAGES["break"],
        ))

    return issues


def resolve_verdict(
    score: float,
    issues: list[ContinuityIssue],
    pass_score: float = DEFAULT_PASS_SCORE,
    reject_score: float = DEFAULT_REJECT_SCORE,
) -> Verdict:
    """Critical issue or low score rejects; major issue or sub-pass score revises."""
    severities = {issue.severity for issue in issues}
    if IssueSeverity.CRITICAL in severities or score < reject_score:
        return Verdict.REJECT
    if score < pass_score or IssueSeverity.MAJOR in severities:
        return Verdict.REVISE
    return Verdict.PASS


def vacuous_pass_assessment() -> ContinuityAssessment:
    """Assessment used when there is nothing to check against (or the gate is off)."""
    return ContinuityAssessment(
        score=10.0,
        verdict=Verdict.PASS,
        issues=[],
        metrics=ContinuityMetrics(
            opening_coverage=1.0,
            event_coverage=1.0,
            hook_coverage=1.0,
            timeline_cue=True,
            signal_totals=SignalTotals(),
        ),
        matched_signals=MatchedSignals(),
    )


def _empty_content_assessment() -> ContinuityAssessment:
    return ContinuityAssessment(
        score=0.0,
        verdict=Verdict.REJECT,
        issues=[ContinuityIssue(IssueType.TIMELINE, IssueSeverity.CRITICAL, _MESSAGES["empty"])],
        metrics=ContinuityMetrics(),
        matched_signals=MatchedSignals(),
    )


def assess_chapter_continuity(
    candidate_content: Optional[str],
    chapters,
    summaries,
    *,
    pass_score: Optional[float] = None,
    reject_score: Optional[float] = None,
    opening_window_chars: Optional[int] = None,
    max_anchor_signals: Optional[int] = None,
    max_event_signals: Optional[int] = None,
    max_hook_signals: Optional[int] = None,
) -> ContinuityAssessment:
    """Assess whether a candidate chapter plausibly continues the story.

    Args:
        candidate_content: Generated chapter text.
        chapters: Prior chapters (ChapterRef or mappings), any order.
        summaries: Prior chapter summaries (ChapterSummaryRef or mappings).
        pass_score: Scores below this are at best ``revise`` (default 6.2).
        reject_score: Scores below this are ``reject`` (default 4.9).
        opening_window_chars: Opening span checked for anchors (default 420).
        max_anchor_signals / max_event_signals / max_hook_signals: Signal caps.

    Returns:
        ContinuityAssessment with a score in [4, 10] whenever there is both
        content and history, 0 for empty content, 10 without history.
    """
    pass_score = DEFAULT_PASS_SCORE if pass_score is None else pass_score
    reject_score = DEFAULT_REJECT_SCORE if reject_score is None else reject_score
    if opening_window_chars is None:
        opening_window_chars = DEFAULT_OPENING_WINDOW_CHARS
    if max_anchor_signals is None:
        max_anchor_signals = DEFAULT_MAX_ANCHOR_SIGNALS
    if max_event_signals is None:
        max_event_signals = DEFAULT_MAX_EVENT_SIGNALS
    if max_hook_signals is None:
        max_hook_signals = DEFAULT_MAX_HOOK_SIGNALS

    content = normalize_whitespace(candidate_content if isinstance(candidate_content, str) else "")
    if not content:
        logger.debug("Continuity assessment: empty candidate content, rejecting")
        return _empty_content_assessment()

    chapter_refs = coerce_chapters(chapters)
    summary_refs = coerce_summaries(summaries)

    anchor_signals = collect_anchor_signals(chapter_refs, max_anchor_signals)
    event_signals = collect_event_signals(summary_refs, max_event_signals)
    hook_signals = collect_hook_signals(summary_refs, max_hook_signals)

    if not (anchor_signals or event_signals or hook_signals):
        logger.debug("Continuity assessment: no history signals, vacuous pass")
        return vacuous_pass_assessment()

    opening_text = content[:max(0, opening_window_chars)]
    opening_match = match_signals(opening_text, anchor_signals)
    event_match = match_signals(content, event_signals)
    hook_match = match_signals(content, hook_signals)
    timeline_cue = has_timeline_cue(opening_text)

    if opening_match.total == 0:
        opening_coverage = 1.0
    else:
        opening_coverage = min(
            1.0,
            opening_match.coverage * OPENING_MATCH_WEIGHT + (TIMELINE_CUE_BONUS if timeline_cue else 0.0),
        )
    event_coverage = 1.0 if event_match.total == 0 else event_match.coverage
    hook_coverage = 1.0 if hook_match.total == 0 else hook_match.coverage

    weighted = (
        opening_coverage * OPENING_WEIGHT
        + event_coverage * EVENT_WEIGHT
        + hook_coverage * HOOK_WEIGHT
    )
    score = round(BASE_SCORE + weighted * SCORE_SPAN, 2)

    issues = detect_continuity_issues(
        opening_match, event_match, hook_match,
        opening_coverage, event_coverage, hook_coverage,
        timeline_cue,
    )
    verdict = resolve_verdict(score, issues, pass_score, reject_score)

    logger.debug(
        "Continuity assessment: score=%.2f verdict=%s signals=(%d/%d/%d) issues=%d",
        score, verdict.value, len(anchor_signals), len(event_signals), len(hook_signals), len(issues),
    )

    return ContinuityAssessment(
        score=score,
        verdict=verdict,
        issues=issues,
        metrics=ContinuityMetrics(
            opening_coverage=round(opening_coverage, 3),
            event_coverage=round(event_coverage, 3),
            hook_coverage=round(hook_coverage, 3),
            timeline_cue=timeline_cue,
            signal_totals=SignalTotals(
                anchors=len(anchor_signals),
                events=len(event_signals),
                hooks=len(hook_signals),
            ),
        ),
        matched_signals=MatchedSignals(
            anchors=list(opening_match.matched),
            events=list(event_match.matched),
            hooks=list(hook_match.matched),
        ),
    )
