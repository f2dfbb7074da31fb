"""Tests for the JSON file storage layer."""

import json
from datetime import datetime, timezone
from unittest.mock import patch

from switchup.memory.models import CheckInAnswer, DailyCheckIn, DayPlan, Goal, Strategy, WeeklyPlan
from switchup.memory.storage import (
    CHECK_INS_FILE,
    GOAL_FILE,
    WEEKLY_PLAN_FILE,
    Storage,
)


def _goal() -> Goal:
    return Goal(
        text="Sleep more",
        why="Energy",
        created_at=datetime(2025, 1, 1, 22, 15, 30, tzinfo=timezone.utc),
    )


class TestEntities:
    def test_missing_files_mean_no_value(self, storage):
        assert storage.load_goal() is None
        assert storage.load_strategy() is None
        assert storage.load_weekly_plan() is None

    def test_goal_round_trip(self, storage):
        goal = _goal()
        assert storage.save_goal(goal) is True
        assert storage.load_goal() == goal

    def test_saving_twice_is_idempotent(self, storage):
        goal = _goal()
        storage.save_goal(goal)
        storage.save_goal(goal)
        assert storage.load_goal() == goal

    def test_goal_file_uses_camel_case_keys(self, storage):
        storage.save_goal(_goal())
        data = json.loads((storage.data_dir / GOAL_FILE).read_text())
        assert set(data) == {"text", "why", "createdAt"}

    def test_strategy_round_trip(self, storage):
        strategy = Strategy(daily_structure="Up at 7", movement="Cycling")
        storage.save_strategy(strategy)
        assert storage.load_strategy() == strategy

    def test_weekly_plan_round_trip(self, storage):
        plan = WeeklyPlan(
            start_date=datetime(2025, 3, 3, tzinfo=timezone.utc),
            days=[DayPlan(day_number=1, focus="Walk", notes="30 min"), DayPlan(day_number=2, focus="Rest")],
        )
        storage.save_weekly_plan(plan)
        assert storage.load_weekly_plan() == plan

    def test_corrupt_file_loads_as_none(self, storage):
        storage.data_dir.mkdir(parents=True)
        (storage.data_dir / WEEKLY_PLAN_FILE).write_text("{not json")
        assert storage.load_weekly_plan() is None

    def test_write_failure_is_reported_not_raised(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file where the data dir should be")
        storage = Storage(data_dir=blocker / "data")
        assert storage.save_goal(_goal()) is False
        assert storage.load_goal() is None

    def test_no_temp_files_left_behind(self, storage):
        storage.save_goal(_goal())
        assert [p.name for p in storage.data_dir.iterdir()] == [GOAL_FILE]


class TestCheckIns:
    def test_empty_log(self, storage):
        assert storage.load_check_ins() == []

    def test_appends_in_order(self, storage):
        first = DailyCheckIn(answers=[CheckInAnswer(question="How was today?", answer="Good")])
        second = DailyCheckIn(answers=[
            CheckInAnswer(question="How was today?", answer="Mixed", coach_feedback="Keep going"),
        ])
        storage.save_check_in(first)
        storage.save_check_in(second)

        log = storage.load_check_ins()
        assert [c.id for c in log] == [first.id, second.id]
        assert log[1].answers[0].coach_feedback == "Keep going"

    def test_log_is_one_json_array(self, storage):
        storage.save_check_in(DailyCheckIn(answers=[]))
        data = json.loads((storage.data_dir / CHECK_INS_FILE).read_text())
        assert isinstance(data, list)
        assert set(data[0]) == {"id", "date", "answers"}

    def test_unreadable_log_is_moved_aside_not_overwritten(self, storage):
        storage.save_check_in(DailyCheckIn(answers=[CheckInAnswer(question="How was today?", answer="Good")]))
        path = storage.data_dir / CHECK_INS_FILE
        data = json.loads(path.read_text())
        data[0]["answers"][0]["answer"] = 5
        path.write_text(json.dumps(data))
        damaged = path.read_text()

        new = DailyCheckIn(answers=[])
        assert storage.save_check_in(new) is True

        moved = list(storage.data_dir.glob(f"{CHECK_INS_FILE}.corrupt-*"))
        assert len(moved) == 1
        assert moved[0].read_text() == damaged
        assert [c.id for c in storage.load_check_ins()] == [new.id]

    def test_log_left_untouched_when_it_cannot_be_moved(self, storage):
        storage.data_dir.mkdir(parents=True)
        path = storage.data_dir / CHECK_INS_FILE
        path.write_text("{not json")

        with patch("switchup.memory.storage.os.replace", side_effect=OSError("read-only")):
            assert storage.save_check_in(DailyCheckIn(answers=[])) is False

        assert path.read_text() == "{not json"
