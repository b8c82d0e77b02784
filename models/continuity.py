"""Continuity assessment result and gate configuration models."""

from dataclasses import asdict, dataclass, field

from models.enums import IssueSeverity, IssueType, Verdict


@dataclass(frozen=True)
class ContinuityIssue:
    """A single rule-based continuity finding."""
    type: IssueType
    severity: IssueSeverity
    message: str


@dataclass(frozen=True)
class SignalTotals:
    anchors: int = 0
    events: int = 0
    hooks: int = 0


@dataclass(frozen=True)
class ContinuityMetrics:
    opening_coverage: float = 0.0
    event_coverage: float = 0.0
    hook_coverage: float = 0.0
    timeline_cue: bool = False
    signal_totals: SignalTotals = field(default_factory=SignalTotals)


@dataclass(frozen=True)
class MatchedSignals:
    anchors: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    hooks: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ContinuityAssessment:
    """Output of one continuity gate run over a candidate chapter."""
    score: float
    verdict: Verdict
    issues: list[ContinuityIssue] = field(default_factory=list)
    metrics: ContinuityMetrics = field(default_factory=ContinuityMetrics)
    matched_signals: MatchedSignals = field(default_factory=MatchedSignals)

    @property
    def has_critical(self) -> bool:
        return any(issue.severity == IssueSeverity.CRITICAL for issue in self.issues)

    def to_dict(self) -> dict:
        """Plain-dict form; enum members serialize as their string values."""
        data = asdict(self)
        data["verdict"] = self.verdict.value
        data["issues"] = [
            {"type": i.type.value, "severity": i.severity.value, "message": i.message}
            for i in self.issues
        ]
        return data


@dataclass(frozen=True)
class ContinuityGateConfig:
    """Fully resolved gate thresholds; reject_score is always below pass_score."""
    enabled: bool = True
    pass_score: float = 6.8
    reject_score: float = 4.9
    max_repair_attempts: int = 1
