"""Workflow package — LangGraph continuity gate, state, conditions, and callbacks."""

from workflow.graph import build_gate_graph, run_continuity_gate
from workflow.state import ContinuityGateState
from workflow.conditions import route_after_assessment, route_after_gate_init
from workflow.callbacks import WorkflowCallback, LoggingCallback
from workflow.repair import build_gate_error_message, build_repair_prompt

__all__ = [
    "build_gate_graph",
    "run_continuity_gate",
    "ContinuityGateState",
    "route_after_assessment",
    "route_after_gate_init",
    "WorkflowCallback",
    "LoggingCallback",
    "build_gate_error_message",
    "build_repair_prompt",
]
