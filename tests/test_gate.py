"""Tests for the continuity gate assessment."""

import pytest


class TestAssessContinuing:
    def test_continuing_chapter_passes(self, continuing_candidate, station_chapters, station_summaries):
        from continuity.gate import assess_chapter_continuity
        from models.enums import Verdict

        result = assess_chapter_continuity(continuing_candidate, station_chapters, station_summaries)
        assert result.verdict == Verdict.PASS
        assert result.score == pytest.approx(7.6)
        assert result.issues == []

    def test_metrics(self, continuing_candidate, station_chapters, station_summaries):
        from continuity.gate import assess_chapter_continuity

        result = assess_chapter_continuity(continuing_candidate, station_chapters, station_summaries)
        metrics = result.metrics
        assert metrics.opening_coverage == pytest.approx(0.5)
        assert metrics.event_coverage == pytest.approx(0.5)
        assert metrics.hook_coverage == pytest.approx(1.0)
        assert metrics.timeline_cue is False
        assert (metrics.signal_totals.anchors, metrics.signal_totals.events, metrics.signal_totals.hooks) == (3, 2, 1)
        assert result.matched_signals.hooks == ["罗盘真实用途"]
        assert "主角夺回破损罗盘" in result.matched_signals.events
        assert "警报突然拉响" not in result.matched_signals.anchors

    def test_mapping_inputs_match_dataclass_inputs(self, continuing_candidate, station_chapters, station_summaries):
        from continuity.gate import assess_chapter_continuity

        chapters = [{"order": 11, "content": station_chapters[0].content}]
        summaries = [{
            "chapterNumber": 11,
            "keyEvents": ["主角夺回破损罗盘", "警报突然拉响"],
            "hooksPlanted": ["罗盘真实用途"],
        }]
        from_dicts = assess_chapter_continuity(continuing_candidate, chapters, summaries)
        from_refs = assess_chapter_continuity(continuing_candidate, station_chapters, station_summaries)
        assert from_dicts == from_refs

    def test_higher_pass_score_revises(self, continuing_candidate, station_chapters, station_summaries):
        from continuity.gate import assess_chapter_continuity
        from models.enums import Verdict

        result = assess_chapter_continuity(
            continuing_candidate, station_chapters, station_summaries, pass_score=8.0,
        )
        assert result.verdict == Verdict.REVISE

    def test_score_below_reject_score_rejects(self, continuing_candidate, station_chapters, station_summaries):
        from continuity.gate import assess_chapter_continuity
        from models.enums import Verdict

        result = assess_chapter_continuity(
            continuing_candidate, station_chapters, station_summaries, pass_score=8.0, reject_score=7.7,
        )
        assert result.verdict == Verdict.REJECT

    def test_narrow_opening_window(self, continuing_candidate, station_chapters, station_summaries):
        from continuity.gate import assess_chapter_continuity
        from models.enums import IssueType, Verdict

        result = assess_chapter_continuity(
            continuing_candidate, station_chapters, station_summaries, opening_window_chars=5,
        )
        assert result.metrics.opening_coverage == 0.0
        assert result.score == pytest.approx(6.25)
        assert result.verdict == Verdict.REVISE
        assert [i.type for i in result.issues] == [IssueType.OPENING_ANCHOR, IssueType.TIMELINE]

    def test_signal_caps(self, continuing_candidate, station_chapters, station_summaries):
        from continuity.gate import assess_chapter_continuity

        result = assess_chapter_continuity(
            continuing_candidate, station_chapters, station_summaries,
            max_anchor_signals=1, max_event_signals=1,
        )
        assert result.metrics.signal_totals.anchors == 1
        assert result.metrics.signal_totals.events == 1


class TestAssessBroken:
    def test_unrelated_chapter_rejected(self, unrelated_candidate, siege_chapters, siege_summaries):
        from continuity.gate import assess_chapter_continuity
        from models.enums import IssueSeverity, IssueType, Verdict

        result = assess_chapter_continuity(unrelated_candidate, siege_chapters, siege_summaries)
        assert result.verdict == Verdict.REJECT
        assert result.score == pytest.approx(4.0)
        assert result.has_critical
        assert [(i.type, i.severity) for i in result.issues] == [
            (IssueType.OPENING_ANCHOR, IssueSeverity.MAJOR),
            (IssueType.TIMELINE, IssueSeverity.MINOR),
            (IssueType.TIMELINE, IssueSeverity.CRITICAL),
        ]

    def test_strict_threshold_not_pass(self):
        from continuity.gate import assess_chapter_continuity
        from models.enums import Verdict

        result = assess_chapter_continuity(
            "主角仍在站台奔跑，但很快转入新的追逐场景。",
            [{"order": 5, "content": "警报拉响后，主角冲入站台，背后敌人紧追不舍。"}],
            [{"chapterNumber": 5, "keyEvents": ["警报拉响", "敌人紧追不舍"], "hooksPlanted": ["敌方首领真实身份"]}],
            pass_score=8.5,
        )
        assert result.score < 8.5
        assert result.verdict in (Verdict.REVISE, Verdict.REJECT)

    def test_adding_history_event_never_lowers_score(self, unrelated_candidate, siege_chapters, siege_summaries):
        from continuity.gate import assess_chapter_continuity

        base = assess_chapter_continuity(unrelated_candidate, siege_chapters, siege_summaries)
        richer = assess_chapter_continuity(
            unrelated_candidate + "城防结界崩裂。", siege_chapters, siege_summaries,
        )
        assert base.score <= richer.score
        assert "城防结界崩裂" in richer.matched_signals.events


class TestAssessEnglish:
    HISTORY_CHAPTERS = [{"order": 1, "content": "The betrayal was revealed at dawn. The hero fled into the forest."}]
    HISTORY_SUMMARIES = [{
        "chapterNumber": 1,
        "keyEvents": ["The hero discovers the betrayal"],
        "hooksPlanted": ["who is the traitor"],
    }]

    def test_continuation_passes(self):
        from continuity.gate import assess_chapter_continuity
        from models.enums import Verdict

        result = assess_chapter_continuity(
            "Deep in the forest, the hero paused, still shaken by the betrayal revealed at dawn. "
            "He knew the traitor was close.",
            self.HISTORY_CHAPTERS,
            self.HISTORY_SUMMARIES,
        )
        assert result.verdict == Verdict.PASS
        assert result.score == pytest.approx(10.0)
        assert result.metrics.timeline_cue is True

    def test_unrelated_rejected(self):
        from continuity.gate import assess_chapter_continuity
        from models.enums import Verdict

        result = assess_chapter_continuity(
            "Lira sold plums in Velden.", self.HISTORY_CHAPTERS, self.HISTORY_SUMMARIES,
        )
        assert result.verdict == Verdict.REJECT
        assert result.score == pytest.approx(4.0)
        assert result.has_critical


class TestAssessEdgeCases:
    def test_no_history_is_vacuous_pass(self):
        from continuity.gate import assess_chapter_continuity
        from models.enums import Verdict

        result = assess_chapter_continuity("任何章节内容。", [], [])
        assert result.score == 10.0
        assert result.verdict == Verdict.PASS
        assert result.issues == []
        assert result.metrics.timeline_cue is True

    @pytest.mark.parametrize("content", ["", "   \n ", None, 123])
    def test_empty_content_rejected(self, content, siege_chapters, siege_summaries):
        from continuity.gate import assess_chapter_continuity
        from models.enums import IssueSeverity, Verdict

        result = assess_chapter_continuity(content, siege_chapters, siege_summaries)
        assert result.score == 0.0
        assert result.verdict == Verdict.REJECT
        assert len(result.issues) == 1
        assert result.issues[0].severity == IssueSeverity.CRITICAL

    def test_malformed_history_never_raises(self):
        from continuity.gate import assess_chapter_continuity
        from models.enums import Verdict

        result = assess_chapter_continuity(
            "主角醒来。",
            [None, 5, {"order": "x", "content": None}],
            [{"keyEvents": "not a list", "hooksPlanted": [None, 3]}],
        )
        assert result.verdict == Verdict.PASS
        assert result.score == 10.0

    @pytest.mark.parametrize("order", [10 ** 400, -(10 ** 400), "1e400"])
    def test_oversized_chapter_numbers_never_raise(self, order):
        from continuity.gate import assess_chapter_continuity

        result = assess_chapter_continuity(
            "主角醒来，决定离开北城。",
            [{"order": order, "content": "主角离开北城。"}],
            [{"chapterNumber": order, "keyEvents": ["主角离开北城"]}],
        )
        assert 4.0 <= result.score <= 10.0

    def test_score_bounds(self, unrelated_candidate, continuing_candidate, siege_chapters, siege_summaries):
        from continuity.gate import assess_chapter_continuity

        for content in (unrelated_candidate, continuing_candidate):
            result = assess_chapter_continuity(content, siege_chapters, siege_summaries)
            assert 4.0 <= result.score <= 10.0

    def test_to_dict_uses_plain_strings(self, unrelated_candidate, siege_chapters, siege_summaries):
        from continuity.gate import assess_chapter_continuity

        data = assess_chapter_continuity(unrelated_candidate, siege_chapters, siege_summaries).to_dict()
        assert data["verdict"] == "reject"
        assert data["issues"][0] == {
            "type": "opening_anchor",
            "severity": "major",
            "message": "开篇未有效承接前章结尾状态，章节衔接感偏弱。",
        }
        assert data["metrics"]["signal_totals"] == {"anchors": 3, "events": 2, "hooks": 1}


class TestTimelineCue:
    @pytest.mark.parametrize("text", [
        "次日清晨，主角醒来。",
        "与此同时，北城陷落。",
        "Meanwhile, at the castle.",
        "The next morning was cold.",
        "The chase continues.",
        "She was still running.",
    ])
    def test_cues_detected(self, text):
        from continuity.gate import has_timeline_cue
        assert has_timeline_cue(text)

    @pytest.mark.parametrize("text", ["", "午后的校园里。", "The distillery burned."])
    def test_no_cue(self, text):
        from continuity.gate import has_timeline_cue
        assert not has_timeline_cue(text)


class TestResolveVerdict:
    def _issue(self, severity):
        from models.continuity import ContinuityIssue
        from models.enums import IssueType
        return ContinuityIssue(IssueType.TIMELINE, severity, "msg")

    def test_critical_rejects_high_score(self):
        from continuity.gate import resolve_verdict
        from models.enums import IssueSeverity, Verdict
        assert resolve_verdict(9.9, [self._issue(IssueSeverity.CRITICAL)]) == Verdict.REJECT

    def test_major_revises_high_score(self):
        from continuity.gate import resolve_verdict
        from models.enums import IssueSeverity, Verdict
        assert resolve_verdict(9.9, [self._issue(IssueSeverity.MAJOR)]) == Verdict.REVISE

    def test_minor_does_not_block_pass(self):
        from continuity.gate import resolve_verdict
        from models.enums import IssueSeverity, Verdict
        assert resolve_verdict(7.0, [self._issue(IssueSeverity.MINOR)]) == Verdict.PASS

    def test_thresholds(self):
        from continuity.gate import resolve_verdict
        from models.enums import Verdict
        assert resolve_verdict(6.2, []) == Verdict.PASS
        assert resolve_verdict(6.19, []) == Verdict.REVISE
        assert resolve_verdict(4.89, []) == Verdict.REJECT


class TestDetectIssues:
    def test_hook_progress_needs_two_hooks(self):
        from continuity.gate import detect_continuity_issues
        from models.enums import IssueType
        from tools.signal_matcher import MatchResult

        full = MatchResult(total=2, matched=["a", "b"], coverage=1.0)
        missed_hooks = MatchResult(total=2, matched=[], coverage=0.0)
        issues = detect_continuity_issues(full, full, missed_hooks, 1.0, 1.0, 0.0, True)
        assert [i.type for i in issues] == [IssueType.HOOK_PROGRESS]

    def test_event_chain_needs_four_events(self):
        from continuity.gate import detect_continuity_issues
        from models.enums import IssueType
        from tools.signal_matcher import MatchResult

        full = MatchResult(total=2, matched=["a", "b"], coverage=1.0)
        missed_events = MatchResult(total=4, matched=[], coverage=0.0)
        issues = detect_continuity_issues(full, missed_events, full, 1.0, 0.0, 1.0, True)
        assert [i.type for i in issues] == [IssueType.EVENT_CHAIN]


class TestDeterminism:
    def test_identical_inputs_identical_output(self, unrelated_candidate, siege_chapters, siege_summaries):
        from continuity.gate import assess_chapter_continuity

        first = assess_chapter_continuity(unrelated_candidate, siege_chapters, siege_summaries)
        second = assess_chapter_continuity(unrelated_candidate, siege_chapters, siege_summaries)
        assert first == second
        assert first.to_dict() == second.to_dict()
