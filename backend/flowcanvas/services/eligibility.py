"""Checks whether a workflow can be switched on for scheduled runs."""

import math

from flowcanvas.models.workflow import EligibilityResult, WorkflowDefinition

SCHEDULED_TRIGGER = "timer_trigger"


def _interval_ms(data: dict) -> float:
    interval_ms = data.get("intervalMs")
    interval_seconds = data.get("intervalSeconds")
    try:
        if interval_ms is not None:
            return float(interval_ms)
        if interval_seconds is not None:
            return float(interval_seconds) * 1000
    except (TypeError, ValueError):
        return math.nan
    return math.nan


def check_enable_eligibility(definition: WorkflowDefinition | None) -> EligibilityResult:
    """A workflow is eligible with exactly one timer trigger with a positive interval."""
    if definition is None:
        return EligibilityResult(ok=False, reason="no workflow loaded")

    triggers = [n for n in definition.nodes if n.data.type == SCHEDULED_TRIGGER]
    if not triggers:
        return EligibilityResult(
            ok=False, reason="add a timer_trigger node to enable automation"
        )
    if len(triggers) > 1:
        return EligibilityResult(ok=False, reason="only one trigger node is allowed")

    ms = _interval_ms(triggers[0].data.model_dump())
    if not math.isfinite(ms) or ms <= 0:
        return EligibilityResult(
            ok=False, reason="timer_trigger requires a valid interval"
        )

    return EligibilityResult(ok=True)
