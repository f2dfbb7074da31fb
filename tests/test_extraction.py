"""Tests for slot-level merge and applying coach replies to storage."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from switchup.agent.extraction import apply_reply, merge, persist_payload
from switchup.memory.models import DayPlan, Goal, ParsedPayload, Strategy, WeeklyPlan


@pytest.fixture
def old_goal():
    return Goal(text="Run a 10k", why="Fun", created_at=datetime(2024, 6, 1, tzinfo=timezone.utc))


@pytest.fixture
def old_strategy():
    return Strategy(daily_structure="Up at 6", food_preferences="Vegetarian")


@pytest.fixture
def old_plan():
    return WeeklyPlan(days=[DayPlan(day_number=1, focus="Rest")])


# ── Merge ────────────────────────────────────────────────────────


class TestMerge:
    def test_new_goal_wins(self, old_goal, old_strategy, old_plan):
        new_goal = Goal(text="Sleep more", why="Energy")
        goal, strategy, plan = merge(ParsedPayload(goal=new_goal), old_goal, old_strategy, old_plan)
        assert goal == new_goal
        assert strategy == old_strategy
        assert plan == old_plan

    def test_empty_payload_keeps_everything(self, old_goal, old_strategy, old_plan):
        assert merge(ParsedPayload(), old_goal, old_strategy, old_plan) == (old_goal, old_strategy, old_plan)

    def test_empty_payload_keeps_missing_slots_missing(self):
        assert merge(ParsedPayload(), None, None, None) == (None, None, None)

    def test_strategy_is_replaced_not_field_merged(self, old_strategy):
        _, strategy, _ = merge(ParsedPayload(strategy=Strategy(movement="Swim")), None, old_strategy, None)
        assert strategy.movement == "Swim"
        assert strategy.daily_structure is None
        assert strategy.food_preferences is None

    def test_plan_is_replaced_as_a_unit(self, old_plan):
        new_plan = WeeklyPlan(days=[DayPlan(day_number=2, focus="Walk")])
        _, _, plan = merge(ParsedPayload(weekly_plan=new_plan), None, None, old_plan)
        assert [d.day_number for d in plan.days] == [2]


# ── Persisting ───────────────────────────────────────────────────


class TestPersistPayload:
    def test_writes_only_non_null_slots(self):
        storage = MagicMock()
        storage.load_goal.return_value = None
        storage.load_strategy.return_value = None
        storage.load_weekly_plan.return_value = None

        written = persist_payload(ParsedPayload(goal=Goal(text="Sleep more", why="Energy")), storage)

        assert written == ["goal"]
        storage.save_goal.assert_called_once()
        storage.save_strategy.assert_not_called()
        storage.save_weekly_plan.assert_not_called()

    def test_one_write_per_merged_slot(self, old_goal, old_strategy):
        storage = MagicMock()
        storage.load_goal.return_value = old_goal
        storage.load_strategy.return_value = old_strategy
        storage.load_weekly_plan.return_value = None

        new_plan = WeeklyPlan(days=[DayPlan(day_number=1, focus="Walk")])
        persist_payload(ParsedPayload(weekly_plan=new_plan), storage)

        storage.save_goal.assert_called_once_with(old_goal)
        storage.save_strategy.assert_called_once_with(old_strategy)
        storage.save_weekly_plan.assert_called_once_with(new_plan)


class TestApplyReply:
    def test_goal_reply_scenario(self, storage):
        reply = (
            'Great idea!\n```json\n'
            '{"goal":{"text":"Sleep more","why":"Energy","createdAt":"2025-01-01T00:00:00Z"}}\n'
            '```'
        )
        prose = apply_reply(reply, storage)

        assert prose == "Great idea!"
        goal = storage.load_goal()
        assert goal.text == "Sleep more"
        assert goal.why == "Energy"
        assert goal.created_at == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_plain_reply_touches_nothing(self, storage):
        prose = apply_reply("  What's your main goal?  ", storage)
        assert prose == "What's your main goal?"
        assert storage.load_goal() is None
        assert not storage.data_dir.exists()

    def test_malformed_block_keeps_prose_and_state(self, storage, old_goal):
        storage.save_goal(old_goal)
        prose = apply_reply('Noted.\n```json\n{"goal": {"text": 1}}\n```', storage)
        assert prose == "Noted."
        assert storage.load_goal() == old_goal

    def test_block_only_reply_returns_empty_prose_but_persists(self, storage):
        prose = apply_reply('```json\n{"strategy": {"recovery": "Sleep 8 hours"}}\n```', storage)
        assert prose == ""
        assert storage.load_strategy().recovery == "Sleep 8 hours"
