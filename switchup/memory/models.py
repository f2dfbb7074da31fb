"""Coaching entities shared by the conversation, extraction and storage layers.

Attributes are snake_case in Python and camelCase on the wire, matching the
JSON block the coach emits and the documents written to disk.
"""

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Message(_CamelModel):
    role: Literal["user", "assistant", "system"]
    content: str


class Goal(_CamelModel):
    text: str
    why: str
    # The coach usually omits it, so decoding stamps the time of disclosure.
    created_at: AwareDatetime = Field(default_factory=_utc_now)


class Strategy(_CamelModel):
    daily_structure: str | None = None
    food_preferences: str | None = None
    movement: str | None = None
    recovery: str | None = None


class DayPlan(_CamelModel):
    day_number: int
    focus: str
    notes: str | None = None


class WeeklyPlan(_CamelModel):
    start_date: AwareDatetime | None = None
    days: list[DayPlan]

    def day(self, day_number: int) -> DayPlan | None:
        """Return the first plan entry for a day number, if any."""
        return next((d for d in self.days if d.day_number == day_number), None)


class CheckInAnswer(_CamelModel):
    question: str
    answer: str
    coach_feedback: str | None = None


class DailyCheckIn(_CamelModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    date: AwareDatetime = Field(default_factory=_utc_now)
    answers: list[CheckInAnswer]


class ParsedPayload(_CamelModel):
    """Structured update carried by one coach reply. Every slot is optional."""
    goal: Goal | None = None
    strategy: Strategy | None = None
    weekly_plan: WeeklyPlan | None = None

    def is_empty(self) -> bool:
        return self.goal is None and self.strategy is None and self.weekly_plan is None
