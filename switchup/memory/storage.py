"""Local JSON persistence for the coach's goal, strategy, weekly plan and check-ins.

Each entity is one whole document under the data directory. Goal, strategy
and weekly plan are singletons overwritten on every save; check-ins are an
append-only list stored as one JSON array.

Failures never propagate to the caller: a missing file means "no value yet",
and unreadable files or failed writes are logged so the in-memory session
stays authoritative.
"""

import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, TypeAdapter, ValidationError

from switchup.agent.config import DATA_DIR
from switchup.memory.models import DailyCheckIn, Goal, Strategy, WeeklyPlan

logger = logging.getLogger(__name__)

GOAL_FILE = "goal.json"
STRATEGY_FILE = "strategy.json"
WEEKLY_PLAN_FILE = "weeklyPlan.json"
CHECK_INS_FILE = "dailyCheckIns.json"

_CHECK_IN_LIST = TypeAdapter(list[DailyCheckIn])


def atomic_write_text(path: Path, text: str) -> None:
    """Write text through a temp file in the same directory, then replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".tmp_{path.stem}_", dir=str(path.parent), text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, str(path))
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class Storage:
    """File-backed store for the coaching entities."""

    def __init__(self, data_dir: str | Path | None = None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR
        self._locks = {
            name: threading.Lock()
            for name in (GOAL_FILE, STRATEGY_FILE, WEEKLY_PLAN_FILE, CHECK_INS_FILE)
        }

    # ── Goal / Strategy / WeeklyPlan ─────────────────────────────

    def save_goal(self, goal: Goal) -> bool:
        return self._save_entity(GOAL_FILE, goal)

    def load_goal(self) -> Goal | None:
        return self._load_entity(GOAL_FILE, Goal)

    def save_strategy(self, strategy: Strategy) -> bool:
        return self._save_entity(STRATEGY_FILE, strategy)

    def load_strategy(self) -> Strategy | None:
        return self._load_entity(STRATEGY_FILE, Strategy)

    def save_weekly_plan(self, plan: WeeklyPlan) -> bool:
        return self._save_entity(WEEKLY_PLAN_FILE, plan)

    def load_weekly_plan(self) -> WeeklyPlan | None:
        return self._load_entity(WEEKLY_PLAN_FILE, WeeklyPlan)

    # ── Daily Check-Ins ──────────────────────────────────────────

    def save_check_in(self, check_in: DailyCheckIn) -> bool:
        """Append one check-in record to the log. Returns True on success.

        An unreadable log is moved aside before a new one is started, so
        earlier records are never overwritten.
        """
        path = self._path(CHECK_INS_FILE)
        with self._locks[CHECK_INS_FILE]:
            existing = []
            if path.exists():
                try:
                    existing = _CHECK_IN_LIST.validate_json(path.read_bytes())
                except (OSError, ValidationError) as e:
                    logger.error("Check-in log %s is unreadable: %s", path, e)
                    if not self._quarantine(path):
                        return False
            existing.append(check_in)
            data = _CHECK_IN_LIST.dump_json(existing, by_alias=True, indent=2)
            try:
                atomic_write_text(path, data.decode("utf-8"))
            except OSError:
                logger.exception("Failed to save check-in %s", check_in.id)
                return False
        logger.info("Saved check-in %s (%d answers)", check_in.id, len(check_in.answers))
        return True

    def load_check_ins(self) -> list[DailyCheckIn]:
        """Return the full check-in log, oldest first. Empty if absent."""
        with self._locks[CHECK_INS_FILE]:
            return self._read_check_ins()

    # ── Internals ────────────────────────────────────────────────

    def _path(self, filename: str) -> Path:
        return self.data_dir / filename

    def _save_entity(self, filename: str, entity: BaseModel) -> bool:
        path = self._path(filename)
        with self._locks[filename]:
            try:
                atomic_write_text(path, entity.model_dump_json(by_alias=True, indent=2))
            except OSError:
                logger.exception("Failed to save %s", path)
                return False
        logger.info("Saved %s", filename)
        return True

    def _load_entity(self, filename: str, model: type[BaseModel]):
        path = self._path(filename)
        with self._locks[filename]:
            if not path.exists():
                logger.debug("%s not found, likely first launch", filename)
                return None
            try:
                return model.model_validate_json(path.read_text(encoding="utf-8"))
            except (OSError, ValidationError) as e:
                logger.warning("Could not load %s: %s", path, e)
                return None

    def _read_check_ins(self) -> list[DailyCheckIn]:
        path = self._path(CHECK_INS_FILE)
        if not path.exists():
            return []
        try:
            return _CHECK_IN_LIST.validate_json(path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning("Could not load check-ins from %s: %s", path, e)
            return []

    def _quarantine(self, path: Path) -> bool:
        """Rename a bad file to `<name>.corrupt-<timestamp>`. Returns True on success."""
        stamp = datetime.now().strftime("%Y-%m-%d_%H%M%S_%f")
        target = path.with_name(f"{path.name}.corrupt-{stamp}")
        try:
            os.replace(path, target)
        except OSError:
            logger.exception("Could not move %s aside; leaving it untouched", path)
            return False
        logger.warning("Moved unreadable %s to %s", path.name, target.name)
        return True
