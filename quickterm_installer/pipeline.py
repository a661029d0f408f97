from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


class SetupAborted(RuntimeError):
    """Raised to stop the run; the CLI exits with status 1."""


class Step(Protocol):
    """A single idempotent step."""

    step_id: str
    required: bool

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    failed_steps: List[str]

    @property
    def ok(self) -> bool:
        return not self.failed_steps


def set_step_result(state: Dict[str, Any], step_id: str, ok: bool) -> None:
    state.setdefault("execution", {}).setdefault("results", {})[step_id] = bool(ok)


def step_result(state: Dict[str, Any], step_id: str) -> Optional[bool]:
    return ((state.get("execution") or {}).get("results") or {}).get(step_id)


def add_warning(state: Dict[str, Any], **details: Any) -> None:
    state.setdefault("execution", {}).setdefault("warnings", []).append(details)


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    abort_on_failure: bool = False,
) -> PipelineResult:
    """Run steps in order. A failing step is logged and the run continues.

    A step reports failure by raising or by recording a False result.
    ``SetupAborted`` always propagates; a failing ``required`` step is
    turned into ``SetupAborted`` when ``abort_on_failure`` is set.
    """

    ran: List[str] = []
    failed: List[str] = []

    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        state.setdefault("execution", {})["current_step"] = step.step_id
        logger.info("Running step %s", step.step_id)

        try:
            state = step.run(state)
        except SetupAborted:
            raise
        except Exception as e:
            logger.exception("Step %s failed", step.step_id)
            state.setdefault("execution", {}).setdefault("errors", []).append(
                {"step": step.step_id, "error": str(e)}
            )
            set_step_result(state, step.step_id, False)

        ok = step_result(state, step.step_id)
        if ok is None:
            ok = True
            set_step_result(state, step.step_id, True)
        ran.append(step.step_id)

        if not ok:
            failed.append(step.step_id)
            if abort_on_failure and getattr(step, "required", False):
                raise SetupAborted(f"Required step {step.step_id} failed")
            logger.warning("Step %s did not complete; continuing", step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran, failed_steps=failed)
