"""Central configuration for the SwitchUp coach.

All values come from environment variables (a `.env` file is loaded when the
`switchup` package is imported):

- GEMINI_API_KEY: API key for the Gemini backend.
- SWITCHUP_MODEL: Gemini model name used for every call.
- SWITCHUP_TEMPERATURE: sampling temperature for chat replies.
- SWITCHUP_DATA_DIR: directory holding goal/strategy/plan/check-in JSON files.
- SWITCHUP_HEALTH_FILE: JSON export read for the opening health summary.
- SWITCHUP_CHECKIN_QUESTIONS: answers collected per daily check-in.
- SWITCHUP_CHECKIN_GENERATE: let the LLM write the follow-up questions.
- SWITCHUP_CHECKIN_FEEDBACK: ask the LLM for feedback after every answer.
- SWITCHUP_LOG_LEVEL: root logging level used by the CLI.
"""

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _bool_env(name: str, default: str = "false") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value in {"1", "true", "yes", "y"}


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


MODEL: str = os.getenv("SWITCHUP_MODEL", "gemini-2.5-flash")
TEMPERATURE: float = _float_env("SWITCHUP_TEMPERATURE", 0.7)

DATA_DIR: Path = Path(os.getenv("SWITCHUP_DATA_DIR", str(PROJECT_ROOT / "data")))
HEALTH_FILE: Path = Path(
    os.getenv("SWITCHUP_HEALTH_FILE", str(DATA_DIR / "health" / "summary.json"))
)

LOG_LEVEL: str = os.getenv("SWITCHUP_LOG_LEVEL", "WARNING").upper()


def get_api_key() -> str | None:
    """Read the Gemini API key at call time so tests can patch the env."""
    return os.environ.get("GEMINI_API_KEY") or None


@dataclass
class CheckInConfig:
    """How a daily check-in session runs.

    question_count counts every answer collected, the fixed opening
    question included.
    """
    question_count: int = 3
    generate_questions: bool = True
    coach_feedback: bool = False

    def __post_init__(self):
        if self.question_count < 1:
            raise ValueError("question_count must be at least 1")

    @classmethod
    def from_env(cls) -> "CheckInConfig":
        count = _int_env("SWITCHUP_CHECKIN_QUESTIONS", 3)
        return cls(
            question_count=count if count >= 1 else 3,
            generate_questions=_bool_env("SWITCHUP_CHECKIN_GENERATE", "true"),
            coach_feedback=_bool_env("SWITCHUP_CHECKIN_FEEDBACK", "false"),
        )
