"""Conditional routing functions for the continuity gate graph."""

from models.enums import Verdict
from workflow.state import ContinuityGateState


def route_after_gate_init(state: ContinuityGateState) -> str:
    """Disabled gate goes straight to finalize with the vacuous assessment."""
    gate_config = state.get("gate_config")
    if gate_config is None or not gate_config.enabled:
        return "finalize"
    return "assess_continuity"


def route_after_assessment(state: ContinuityGateState) -> str:
    """Route after assessment: pass -> finalize, otherwise repair (up to max attempts)."""
    assessment = state.get("assessment")
    if assessment is None:
        return "finalize"
    if assessment.verdict == Verdict.PASS:
        return "finalize"

    repair_attempts = state.get("repair_attempts", 0)
    max_attempts = state["gate_config"].max_repair_attempts

    # Attempts exhausted -> finalize with the latest verdict
    if repair_attempts >= max_attempts:
        return "finalize"

    return "repair_chapter"
