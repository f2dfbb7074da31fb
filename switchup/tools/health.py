"""Best-effort health summary for the coach's opening message.

Reads a small JSON export of recent wearable data:

    {"sleepSeconds": 26100, "restingHeartRate": 58, "hrvMs": 45.2}

Every metric is optional. A missing, unreadable or empty export yields no
summary and the greeting falls back to the generic text.
"""

import json
import logging
from pathlib import Path

from switchup.agent.config import HEALTH_FILE
from switchup.agent.prompts import DEFAULT_GREETING

logger = logging.getLogger(__name__)


def _positive_number(value) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if value > 0 else None


def format_health_summary(metrics: dict) -> str | None:
    """Phrase sleep, resting heart rate and HRV as one sentence per metric.

    Returns None when none of the metrics is usable.
    """
    sleep = _positive_number(metrics.get("sleepSeconds"))
    rhr = _positive_number(metrics.get("restingHeartRate"))
    hrv = _positive_number(metrics.get("hrvMs"))
    if sleep is None and rhr is None and hrv is None:
        return None

    parts = [
        f"last night you slept approximately {int(sleep // 3600)} hours" if sleep else "no sleep data",
        f"your resting heart rate yesterday was {int(rhr)} bpm" if rhr else "no resting heart rate data",
        f"your last HRV measurement was {int(hrv)} ms" if hrv else "no HRV data",
    ]
    return ". ".join(parts) + "."


class HealthSummaryProvider:
    """Reads the health export file and summarizes it."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else HEALTH_FILE

    def fetch_summary(self) -> str | None:
        if not self.path.exists():
            logger.debug("No health export at %s", self.path)
            return None
        try:
            metrics = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read health export %s: %s", self.path, e)
            return None
        if not isinstance(metrics, dict):
            logger.warning("Health export %s is not a JSON object", self.path)
            return None
        return format_health_summary(metrics)


def compose_greeting(summary: str | None) -> str:
    """Build the coach's opening line, with the health summary when available."""
    if not summary:
        return DEFAULT_GREETING
    return f"Hi! {summary} Let's start by clarifying your main goal."


def opening_message(provider: HealthSummaryProvider | None) -> str:
    """Greeting for a new conversation. Never raises."""
    if provider is None:
        return DEFAULT_GREETING
    try:
        summary = provider.fetch_summary()
    except Exception as e:
        logger.warning("Health summary unavailable: %s", e)
        summary = None
    return compose_greeting(summary)
