"""LangGraph workflow state definition."""

from typing import TypedDict

from models.continuity import ContinuityAssessment, ContinuityGateConfig


class ContinuityGateState(TypedDict, total=False):
    """State shared by the continuity gate repair loop nodes.

    Fields are grouped logically:
    - Chapter: chapter_order, base_prompt, content
    - History: chapters, summaries, continuity_context, continuity_rules
    - Config: gate_config, signal_limits (resolved before the run)
    - Result: assessment, repair_attempts, blocked
    - Control: last_node
    """

    # Chapter under assessment
    chapter_order: int
    base_prompt: str  # Original generation prompt, reused for repairs
    content: str  # Current draft; replaced after each repair

    # History (read-only for the loop)
    chapters: list
    summaries: list
    continuity_context: str
    continuity_rules: str

    # Config
    gate_config: ContinuityGateConfig
    signal_limits: dict  # Keyword options for assess_chapter_continuity

    # Result
    assessment: ContinuityAssessment
    repair_attempts: int
    blocked: bool

    # Control flow
    last_node: str
