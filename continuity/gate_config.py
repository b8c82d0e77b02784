"""Resolve continuity gate thresholds from a novel's workflow config.

Workflow configs are user-editable JSON, so every value may be missing,
stringly-typed, or nonsense. Resolution always yields a valid config.
"""

import math
from collections.abc import Mapping
from typing import Any

from models.continuity import ContinuityGateConfig

PASS_SCORE_OFFSET = 0.6  # Gate pass score sits this far below the review pass threshold
DERIVED_PASS_RANGE = (5.8, 8.2)
PASS_SCORE_RANGE = (4.5, 9.5)
MIN_REJECT_SCORE = 3.5
MIN_SCORE_GAP = 0.4

_FALSE_STRINGS = {"false", "0", "no", "off"}


def _to_mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _to_number(value: Any, fallback: float) -> float:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        try:
            as_float = float(value)
        except OverflowError:
            return fallback
        return as_float if math.isfinite(as_float) else fallback
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value)
        except ValueError:
            return fallback
        return parsed if math.isfinite(parsed) else fallback
    return fallback


def _to_non_negative_int(value: Any, fallback: int) -> int:
    return max(0, math.floor(_to_number(value, fallback)))


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _is_enabled(value: Any) -> bool:
    if value is False:
        return False
    if isinstance(value, str) and value.strip().lower() in _FALSE_STRINGS:
        return False
    return True


def resolve_continuity_gate_config(
    workflow_config: Any,
    *,
    default_review_pass_threshold: Any = 7.4,
    default_reject_score: Any = 4.9,
    default_max_repair_attempts: Any = 1,
) -> ContinuityGateConfig:
    """Build a ContinuityGateConfig from ``workflow_config``.

    Reads ``review.passThreshold`` and the ``continuityGate`` section
    (``continuity_gate`` is accepted too). The pass score defaults to the
    review threshold minus 0.6, clamped to [5.8, 8.2]; explicit values are
    clamped to [4.5, 9.5]. The reject score is clamped to
    [3.5, pass_score - 0.4]. Never raises.
    """
    workflow = _to_mapping(workflow_config)
    review = _to_mapping(workflow.get("review"))
    gate = _to_mapping(workflow.get("continuityGate", workflow.get("continuity_gate")))

    review_default = _to_number(default_review_pass_threshold, 7.4)
    reject_default = _to_number(default_reject_score, 4.9)
    repair_default = _to_non_negative_int(default_max_repair_attempts, 1)

    review_threshold = _to_number(
        review.get("passThreshold", review.get("pass_threshold")), review_default
    )
    derived_pass = _clamp(review_threshold - PASS_SCORE_OFFSET, *DERIVED_PASS_RANGE)

    pass_score = _clamp(
        _to_number(gate.get("passScore", gate.get("pass_score")), derived_pass),
        *PASS_SCORE_RANGE,
    )
    reject_score = _clamp(
        _to_number(gate.get("rejectScore", gate.get("reject_score")), reject_default),
        MIN_REJECT_SCORE,
        pass_score - MIN_SCORE_GAP,
    )

    return ContinuityGateConfig(
        enabled=_is_enabled(gate.get("enabled")),
        pass_score=round(pass_score, 2),
        reject_score=round(reject_score, 2),
        max_repair_attempts=_to_non_negative_int(
            gate.get("maxRepairAttempts", gate.get("max_repair_attempts")), repair_default
        ),
    )
