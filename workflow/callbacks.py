"""Gate progress callbacks for monitoring the repair loop."""

import logging
from typing import Protocol, runtime_checkable

from models.continuity import ContinuityAssessment

logger = logging.getLogger(__name__)


@runtime_checkable
class WorkflowCallback(Protocol):
    """Protocol for continuity gate progress callbacks.

    Implement this protocol to hook into the repair loop lifecycle.
    """

    def on_node_exit(self, node: str, state: dict) -> None:
        """Called after a node finishes executing with the current accumulated state."""
        ...

    def on_assessment(self, assessment: ContinuityAssessment, repair_attempts: int) -> None:
        """Called after every assessment, including the one following each repair."""
        ...

    def on_workflow_complete(self, final_state: dict) -> None:
        """Called when the gate finishes (passed, exhausted, or disabled)."""
        ...


class LoggingCallback:
    """Lightweight callback that logs progress to the standard logger."""

    def on_node_exit(self, node: str, state: dict) -> None:
        logger.debug("← node: %s", node)

    def on_assessment(self, assessment: ContinuityAssessment, repair_attempts: int) -> None:
        logger.info(
            "Continuity assessment after %d repair(s): score=%.2f verdict=%s issues=%d",
            repair_attempts, assessment.score, assessment.verdict.value, len(assessment.issues),
        )

    def on_workflow_complete(self, final_state: dict) -> None:
        logger.info(
            "Continuity gate complete: repair_attempts=%d blocked=%s",
            final_state.get("repair_attempts", 0),
            final_state.get("blocked", False),
        )
