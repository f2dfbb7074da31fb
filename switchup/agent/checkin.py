"""Daily check-in: a short, bounded Q&A about the user's day.

A session opens with a fixed question. The first answer is used to prepare
the follow-up questions, either generated by the LLM from the user's goal,
strategy and today's plan focus, or taken from a fixed fallback set. The
session is complete once `question_count` answers have been collected.
"""

import logging
from itertools import cycle, islice

from switchup.agent.config import CheckInConfig
from switchup.agent.llm import LLMResult
from switchup.agent.prompts import (
    CHECK_IN_COACH_SYSTEM_PROMPT,
    FALLBACK_QUESTIONS,
    OPENING_QUESTION,
    build_feedback_prompt,
    build_follow_up_prompt,
)
from switchup.memory.models import CheckInAnswer, DailyCheckIn, Message
from switchup.memory.storage import Storage

logger = logging.getLogger(__name__)

QUESTION_PREFIX = "Q: "


class CheckInSession:
    """Questions asked and answers collected during one check-in."""

    def __init__(self, config: CheckInConfig | None = None):
        self.config = config or CheckInConfig()
        self.asked: list[str] = []
        self.answers: list[CheckInAnswer] = []
        self.follow_ups: list[str] = []

    @property
    def is_complete(self) -> bool:
        return len(self.answers) >= self.config.question_count

    @property
    def needs_follow_ups(self) -> bool:
        """True right after the first answer, before any follow-up is known."""
        return len(self.answers) == 1 and not self.follow_ups and not self.is_complete

    @property
    def follow_up_count(self) -> int:
        return self.config.question_count - 1

    def ask(self, question: str) -> str:
        self.asked.append(question)
        return question

    def ask_opening(self) -> str:
        return self.ask(OPENING_QUESTION)

    def record_answer(self, answer: str) -> CheckInAnswer:
        """Pair an answer with the most recently asked question."""
        question = self.asked[-1] if self.asked else OPENING_QUESTION
        entry = CheckInAnswer(question=question, answer=answer)
        self.answers.append(entry)
        return entry

    def next_question(self) -> str | None:
        """Return the next follow-up to ask, or None when nothing is left."""
        if self.is_complete:
            return None
        index = len(self.answers) - 1
        if 0 <= index < len(self.follow_ups):
            return self.follow_ups[index]
        return None

    def to_record(self) -> DailyCheckIn:
        return DailyCheckIn(answers=list(self.answers))


def parse_questions(text: str) -> list[str]:
    """Pull the `Q: ` prefixed lines out of an LLM reply."""
    questions = []
    for line in text.splitlines():
        line = line.strip()
        if line.startswith(QUESTION_PREFIX):
            question = line[len(QUESTION_PREFIX):].strip()
            if question:
                questions.append(question)
    return questions


def fit_questions(questions: list[str], count: int) -> list[str]:
    """Trim to `count`, topping up from the fallback set when short."""
    if count <= 0:
        return []
    if len(questions) >= count:
        return questions[:count]
    missing = count - len(questions)
    return questions + list(islice(cycle(FALLBACK_QUESTIONS), missing))


async def generate_follow_up_questions(llm, storage: Storage, first_answer: str, count: int) -> list[str]:
    """Ask the LLM for follow-up questions; fall back to the fixed set.

    Never raises: an LLM failure or a reply without `Q: ` lines yields the
    fallback questions.
    """
    if count <= 0:
        return []

    prompt = build_follow_up_prompt(
        storage.load_goal(),
        storage.load_strategy(),
        storage.load_weekly_plan(),
        first_answer,
        count,
    )
    result: LLMResult = await llm.send([
        Message(role="system", content=CHECK_IN_COACH_SYSTEM_PROMPT),
        Message(role="user", content=prompt),
    ])

    questions = parse_questions(result.text) if result.ok else []
    if not questions:
        logger.info("Using fallback check-in questions (%s)", result.error or "no questions in reply")
    return fit_questions(questions, count)


async def request_feedback(llm, question: str, answer: str) -> LLMResult:
    """Ask the LLM for coaching feedback on one answer."""
    return await llm.send([
        Message(role="system", content=CHECK_IN_COACH_SYSTEM_PROMPT),
        Message(role="user", content=build_feedback_prompt(question, answer)),
    ])
