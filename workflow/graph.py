"""LangGraph StateGraph: continuity gate with bounded repair attempts."""

import logging
from typing import Awaitable, Callable, Optional

from langgraph.graph import StateGraph, END

from config.exceptions import (
    ContinuityGateBlockedError,
    RegenerationError,
    WorkflowStateError,
)
from config.settings import Settings, get_settings
from continuity.context import build_chapter_continuity_context, build_continuity_rules
from continuity.gate import assess_chapter_continuity, vacuous_pass_assessment
from continuity.gate_config import resolve_continuity_gate_config
from models.continuity import ContinuityGateConfig
from models.enums import Verdict
from workflow.conditions import route_after_assessment, route_after_gate_init
from workflow.repair import build_gate_error_message, build_repair_prompt
from workflow.state import ContinuityGateState

logger = logging.getLogger(__name__)

Regenerator = Callable[[str], Awaitable[str]]

# initialize + finalize + (assess, repair) per attempt, with headroom
_MIN_RECURSION_LIMIT = 25


def build_gate_graph(regenerate: Regenerator):
    """Build and return the compiled continuity gate graph.

    Args:
        regenerate: Async callable taking a repair prompt and returning the
            rewritten chapter text.
    """

    async def initialize(state: ContinuityGateState) -> dict:
        """Validate inputs; a disabled gate records the vacuous pass."""
        logger.info("Entering node: initialize")
        if "content" not in state or "gate_config" not in state:
            raise WorkflowStateError(
                "Continuity gate state requires content and gate_config",
                {"keys": sorted(state.keys())},
            )

        update = {"repair_attempts": 0, "blocked": False, "last_node": "initialize"}
        if not state["gate_config"].enabled:
            logger.info("Chapter %d: continuity gate disabled", state.get("chapter_order", 0))
            update["assessment"] = vacuous_pass_assessment()
        return update

    async def assess_continuity(state: ContinuityGateState) -> dict:
        """Score the current draft against the chapter history."""
        gate_config = state["gate_config"]
        assessment = assess_chapter_continuity(
            state.get("content", ""),
            state.get("chapters", []),
            state.get("summaries", []),
            pass_score=gate_config.pass_score,
            reject_score=gate_config.reject_score,
            **(state.get("signal_limits") or {}),
        )
        logger.info(
            "Chapter %d: continuity score=%.2f verdict=%s (attempt %d/%d)",
            state.get("chapter_order", 0),
            assessment.score,
            assessment.verdict.value,
            state.get("repair_attempts", 0),
            gate_config.max_repair_attempts,
        )
        return {"assessment": assessment, "last_node": "assess_continuity"}

    async def repair_chapter(state: ContinuityGateState) -> dict:
        """Ask the regenerator to rewrite the draft with continuity feedback."""
        attempt = state.get("repair_attempts", 0) + 1
        chapter_order = state.get("chapter_order", 0)
        prompt = build_repair_prompt(
            chapter_order=chapter_order,
            base_prompt=state.get("base_prompt", ""),
            draft_content=state.get("content", ""),
            assessment=state["assessment"],
            continuity_context=state.get("continuity_context", ""),
            continuity_rules=state.get("continuity_rules", ""),
        )
        logger.info("Chapter %d: continuity repair attempt %d", chapter_order, attempt)

        try:
            content = await regenerate(prompt)
        except RegenerationError:
            raise
        except Exception as e:
            raise RegenerationError(f"Chapter regeneration failed: {e}", attempt=attempt) from e

        if not isinstance(content, str):
            raise RegenerationError(
                f"Regenerator returned {type(content).__name__}, expected str", attempt=attempt
            )

        return {"content": content, "repair_attempts": attempt, "last_node": "repair_chapter"}

    async def finalize(state: ContinuityGateState) -> dict:
        """Block the chapter when the last verdict is still reject."""
        assessment = state["assessment"]
        blocked = assessment.verdict == Verdict.REJECT
        if blocked:
            logger.warning(
                "Chapter %d: blocked by continuity gate (score=%.2f, repairs=%d)",
                state.get("chapter_order", 0),
                assessment.score,
                state.get("repair_attempts", 0),
            )
        return {"blocked": blocked, "last_node": "finalize"}

    graph = StateGraph(ContinuityGateState)

    graph.add_node("initialize", initialize)
    graph.add_node("assess_continuity", assess_continuity)
    graph.add_node("repair_chapter", repair_chapter)
    graph.add_node("finalize", finalize)

    graph.set_entry_point("initialize")

    # Conditional: disabled gate skips assessment
    graph.add_conditional_edges(
        "initialize",
        route_after_gate_init,
        {
            "assess_continuity": "assess_continuity",
            "finalize": "finalize",
        },
    )

    # Conditional: pass or attempts exhausted -> finalize, else repair
    graph.add_conditional_edges(
        "assess_continuity",
        route_after_assessment,
        {
            "repair_chapter": "repair_chapter",
            "finalize": "finalize",
        },
    )

    # Every repair is re-assessed
    graph.add_edge("repair_chapter", "assess_continuity")
    graph.add_edge("finalize", END)

    return graph.compile()


async def run_continuity_gate(
    content: str,
    chapters: list,
    summaries: list,
    regenerate: Regenerator,
    *,
    gate_config: Optional[ContinuityGateConfig] = None,
    workflow_config: Optional[dict] = None,
    chapter_order: int = 0,
    base_prompt: str = "",
    continuity_context: Optional[str] = None,
    continuity_rules: Optional[str] = None,
    settings: Optional[Settings] = None,
    callback=None,
    raise_on_block: bool = False,
) -> dict:
    """Assess a generated chapter and repair it until it passes or attempts run out.

    Args:
        content: Generated chapter text.
        chapters: Prior chapters (ChapterRef or mappings).
        summaries: Prior chapter summaries (ChapterSummaryRef or mappings).
        regenerate: Async callable returning a rewritten chapter for a prompt.
        gate_config: Resolved gate config. Resolved from ``workflow_config``
            and the settings defaults when omitted.
        workflow_config: Novel workflow config used when ``gate_config`` is None.
        chapter_order: Chapter number, used in prompts and messages.
        base_prompt: Original generation prompt, prepended to repair prompts.
        continuity_context: History block for repair prompts. Built from
            ``chapters`` and ``summaries`` when omitted.
        continuity_rules: Rules block for repair prompts.
        settings: Settings instance. Uses the cached settings when omitted.
        callback: Optional WorkflowCallback for progress reporting.
        raise_on_block: Raise ContinuityGateBlockedError instead of
            returning a blocked result.

    Returns:
        Dict with ``content``, ``assessment``, ``repair_attempts`` and ``blocked``.

    Raises:
        RegenerationError: The regenerator failed or returned a non-string.
        ContinuityGateBlockedError: Blocked and ``raise_on_block`` is set.
    """
    settings = settings or get_settings()
    if gate_config is None:
        gate_config = resolve_continuity_gate_config(
            workflow_config, **settings.gate_config_defaults()
        )
    if continuity_context is None:
        continuity_context = build_chapter_continuity_context(chapters, summaries)
    if continuity_rules is None:
        continuity_rules = build_continuity_rules()

    app = build_gate_graph(regenerate)

    initial_state: ContinuityGateState = {
        "chapter_order": chapter_order,
        "base_prompt": base_prompt,
        "content": content if isinstance(content, str) else "",
        "chapters": list(chapters or []),
        "summaries": list(summaries or []),
        "continuity_context": continuity_context,
        "continuity_rules": continuity_rules,
        "gate_config": gate_config,
        "signal_limits": settings.signal_limits(),
    }

    logger.info(
        "Starting continuity gate: chapter=%d pass=%.2f reject=%.2f max_repairs=%d",
        chapter_order, gate_config.pass_score, gate_config.reject_score,
        gate_config.max_repair_attempts,
    )

    # Each repair cycle uses two nodes (assess + repair)
    recursion_limit = max(_MIN_RECURSION_LIMIT, gate_config.max_repair_attempts * 2 + 10)
    config = {"recursion_limit": recursion_limit}

    if callback is not None:
        final_state = await _run_with_callback(app, initial_state, config, callback)
    else:
        final_state = await app.ainvoke(initial_state, config=config)

    result = {
        "content": final_state.get("content", ""),
        "assessment": final_state["assessment"],
        "repair_attempts": final_state.get("repair_attempts", 0),
        "blocked": final_state.get("blocked", False),
    }

    if result["blocked"] and raise_on_block:
        assessment = result["assessment"]
        raise ContinuityGateBlockedError(
            build_gate_error_message(assessment),
            chapter=chapter_order,
            score=assessment.score,
            issues=assessment.issues,
        )

    logger.info(
        "Continuity gate finished: chapter=%d verdict=%s repairs=%d blocked=%s",
        chapter_order, result["assessment"].verdict.value, result["repair_attempts"], result["blocked"],
    )
    return result


async def _run_with_callback(app, initial_state: dict, config, callback) -> dict:
    """Run the gate using astream() and emit progress callbacks.

    Args:
        app: Compiled LangGraph application.
        initial_state: Initial gate state.
        config: LangGraph config dict.
        callback: WorkflowCallback instance.

    Returns:
        Accumulated final state dict.
    """
    accumulated: dict = dict(initial_state)

    async for event in app.astream(initial_state, config=config):
        # Each event is {node_name: state_update_dict}
        for node_name, node_update in event.items():
            if node_name == "__end__":
                continue

            if isinstance(node_update, dict):
                accumulated.update(node_update)

            callback.on_node_exit(node_name, accumulated)

            if node_name == "assess_continuity":
                callback.on_assessment(
                    accumulated["assessment"], accumulated.get("repair_attempts", 0)
                )

    callback.on_workflow_complete(accumulated)
    return accumulated
