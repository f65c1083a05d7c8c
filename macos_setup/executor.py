from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from .actions import Action, SkippedAction
from .backends import Backends
from .report import Console
from .session import AskFn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionOutcome:
    action_id: str
    succeeded: bool
    detail: str


@dataclass(frozen=True)
class ExecutionContext:
    backends: Backends
    ask: AskFn
    console: Console


@dataclass
class ExecutionResult:
    plan: List[Action]
    outcomes: List[ActionOutcome] = field(default_factory=list)

    def pairs(self) -> Iterator[Tuple[Action, ActionOutcome]]:
        return iter(zip(self.plan, self.outcomes))

    @property
    def failures(self) -> List[ActionOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def attempted(self) -> List[str]:
        return [o.action_id for o in self.outcomes]


def execute_plan(plan: Sequence[Action], ctx: ExecutionContext) -> ExecutionResult:
    """Run every action in order, recording an outcome for each.

    A failing action never stops the run. Actions that require a capability
    whose provider failed earlier are recorded as skipped without running.
    """

    result = ExecutionResult(plan=list(plan))
    lost: Set[str] = set()
    stage: Optional[str] = None
    step = 0

    for action in result.plan:
        if action.stage and action.stage != stage:
            stage = action.stage
            step += 1
            ctx.console.divider()
            ctx.console.info(f"STEP {step}: {stage}")

        if isinstance(action, SkippedAction):
            ctx.console.warning(f"Skipping {action.action.description}: {action.reason}")
            result.outcomes.append(ActionOutcome(action.action_id, False, f"skipped: {action.reason}"))
            continue

        if action.requires and action.requires in lost:
            detail = f"skipped: {action.requires} unavailable"
            ctx.console.warning(f"Skipping {action.description} ({action.requires} unavailable)")
            result.outcomes.append(ActionOutcome(action.action_id, False, detail))
            continue

        logger.info("Running action %s", action.action_id)
        try:
            detail = action.run(ctx)
        except Exception as e:
            logger.exception("Action %s failed", action.action_id)
            ctx.console.error(f"Failed: {action.description}: {e}")
            if action.provides:
                lost.add(action.provides)
            result.outcomes.append(ActionOutcome(action.action_id, False, str(e)))
            continue

        result.outcomes.append(ActionOutcome(action.action_id, True, detail or ""))

    logger.info(
        "Plan finished: %d actions, %d failed",
        len(result.outcomes),
        len(result.failures),
    )
    return result
