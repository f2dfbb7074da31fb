"""Apply a coach reply: separate prose from the structured block and merge it.

The merge is slot-level. A goal, strategy or weekly plan supplied by the
reply replaces the stored one as a whole; slots the reply leaves out keep
their previous value. Sub-fields are never combined.
"""

import logging

from switchup.agent.json_utils import (
    decode_payload,
    extract_structured_block,
    strip_structured_blocks,
)
from switchup.memory.models import Goal, ParsedPayload, Strategy, WeeklyPlan
from switchup.memory.storage import Storage

logger = logging.getLogger(__name__)


def merge(
    parsed: ParsedPayload,
    existing_goal: Goal | None,
    existing_strategy: Strategy | None,
    existing_plan: WeeklyPlan | None,
) -> tuple[Goal | None, Strategy | None, WeeklyPlan | None]:
    """Prefer new values when present, else keep the existing ones."""
    goal = parsed.goal if parsed.goal is not None else existing_goal
    strategy = parsed.strategy if parsed.strategy is not None else existing_strategy
    plan = parsed.weekly_plan if parsed.weekly_plan is not None else existing_plan
    return goal, strategy, plan


def persist_payload(parsed: ParsedPayload, storage: Storage) -> list[str]:
    """Merge a payload into stored state and write each non-null slot once.

    Returns the names of the slots written.
    """
    goal, strategy, plan = merge(
        parsed,
        storage.load_goal(),
        storage.load_strategy(),
        storage.load_weekly_plan(),
    )

    written = []
    if goal is not None:
        storage.save_goal(goal)
        written.append("goal")
    if strategy is not None:
        storage.save_strategy(strategy)
        written.append("strategy")
    if plan is not None:
        storage.save_weekly_plan(plan)
        written.append("weeklyPlan")
    return written


def apply_reply(text: str, storage: Storage) -> str:
    """Persist any structured update in a reply and return its prose.

    The prose may be empty when the reply was only a structured block.
    """
    raw = extract_structured_block(text)
    prose = strip_structured_blocks(text)

    if raw is not None:
        parsed = decode_payload(raw)
        if parsed is not None:
            written = persist_payload(parsed, storage)
            if written:
                logger.info("Coach reply updated: %s", ", ".join(written))

    return prose
