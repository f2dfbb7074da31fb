"""Conversation controller: the chat pipeline between the user and the coach.

Owns two histories that move in lock-step for every assistant-authored
message: the display history shown to the user and the context history sent
to the LLM. Local error notices go to the display history only.

Each user turn is routed by flow mode:
    normal chat  -> system prompt + full context to the LLM, reply applied
    check-in     -> answer recorded, next question asked or session closed

State changes are announced to subscribers as (event, payload) pairs:
"message", "flow_mode", "busy" and "quick_replies".
"""

import logging
from contextlib import contextmanager
from typing import Callable

from switchup.agent.checkin import (
    CheckInSession,
    fit_questions,
    generate_follow_up_questions,
    request_feedback,
)
from switchup.agent.config import CheckInConfig
from switchup.agent.extraction import apply_reply
from switchup.agent.llm import LLMResult
from switchup.agent.prompts import (
    CHECK_IN_TRIGGER,
    CLOSING_MESSAGE,
    COACH_SYSTEM_PROMPT,
    QUICK_REPLIES,
    SAMPLE_PLAN_MESSAGE,
    SAMPLE_PLAN_TRIGGER,
)
from switchup.agent.sample_data import sample_goal, sample_strategy, sample_weekly_plan
from switchup.agent.state_machine import FlowMode, FlowStateMachine
from switchup.memory.models import Message
from switchup.memory.storage import Storage

logger = logging.getLogger(__name__)

# Callback for UI updates: (event, payload) -> None
EventCallback = Callable[[str, object], None]


class ConversationController:
    """Chat state for one user session, with injected LLM and storage."""

    def __init__(
        self,
        llm,
        storage: Storage,
        check_in_config: CheckInConfig | None = None,
        system_prompt: str = COACH_SYSTEM_PROMPT,
    ):
        self.llm = llm
        self.storage = storage
        self.check_in_config = check_in_config or CheckInConfig()
        self.system_prompt = system_prompt

        self.messages: list[Message] = []
        self.context: list[Message] = []
        self.quick_replies: list[str] = []
        self.busy: bool = False
        self.flow = FlowStateMachine()
        self.check_in: CheckInSession | None = None

        self._subscribers: list[EventCallback] = []

    # ── Events ───────────────────────────────────────────────────

    def subscribe(self, callback: EventCallback) -> None:
        self._subscribers.append(callback)

    def _emit(self, event: str, payload: object) -> None:
        for callback in self._subscribers:
            callback(event, payload)

    # ── Session Lifecycle ────────────────────────────────────────

    @property
    def flow_mode(self) -> FlowMode:
        return self.flow.mode

    def start_conversation(self, initial_message: str) -> None:
        """Seed the conversation with the coach's opening line. Runs once."""
        if self.messages:
            return
        self._append_assistant(initial_message)

    async def send_user_message(self, text: str) -> None:
        """Handle one user turn.

        Empty or whitespace-only input, or input while a call is in flight,
        changes nothing.
        """
        text = text.strip()
        if not text or self.busy:
            return

        self._append(Message(role="user", content=text))
        command = text.lower()

        if self.flow.in_check_in:
            await self._handle_check_in_answer(text)
        elif command == CHECK_IN_TRIGGER:
            self.start_daily_check_in()
        elif command == SAMPLE_PLAN_TRIGGER:
            self.generate_sample_plan()
        else:
            await self._ask_coach()

    # ── Normal Flow ──────────────────────────────────────────────

    async def _ask_coach(self) -> None:
        messages = [Message(role="system", content=self.system_prompt), *self.context]
        result = await self._send(messages)
        if not result.ok:
            self._append_error(result.error)
            return

        prose = apply_reply(result.text, self.storage)
        if prose:
            self._append_assistant(prose)

    def generate_sample_plan(self) -> None:
        """Persist a sample goal, strategy and weekly plan."""
        self.storage.save_goal(sample_goal())
        self.storage.save_strategy(sample_strategy())
        self.storage.save_weekly_plan(sample_weekly_plan())
        self._append_assistant(SAMPLE_PLAN_MESSAGE)

    # ── Daily Check-In ───────────────────────────────────────────

    def start_daily_check_in(self) -> None:
        """Open a check-in: ask the opening question and offer quick replies.

        Calling it during a check-in restarts the session.
        """
        if not self.flow.in_check_in:
            self.flow.transition(FlowMode.CHECK_IN, reason="check-in started")
            self._emit("flow_mode", self.flow.mode)
        self.check_in = CheckInSession(self.check_in_config)
        self._set_quick_replies(list(QUICK_REPLIES))
        self._append_assistant(self.check_in.ask_opening())

    async def _handle_check_in_answer(self, answer: str) -> None:
        session = self.check_in
        entry = session.record_answer(answer)

        if len(session.answers) == 1:
            self._set_quick_replies([])

        if self.check_in_config.coach_feedback:
            result = await self._send_with(request_feedback, entry.question, entry.answer)
            if result.ok:
                entry.coach_feedback = result.text
                self._append_assistant(result.text)
            else:
                self._append_error(result.error)

        if session.is_complete:
            self._end_check_in()
            return

        if session.needs_follow_ups:
            session.follow_ups = await self._prepare_follow_ups(entry.answer, session.follow_up_count)

        question = session.next_question()
        if question is None:
            self._end_check_in()
            return
        self._append_assistant(session.ask(question))

    async def _prepare_follow_ups(self, first_answer: str, count: int) -> list[str]:
        if not self.check_in_config.generate_questions:
            return fit_questions([], count)
        with self._busy():
            return await generate_follow_up_questions(self.llm, self.storage, first_answer, count)

    def _end_check_in(self) -> None:
        record = self.check_in.to_record()
        self.storage.save_check_in(record)
        self._append_assistant(CLOSING_MESSAGE)

        self.check_in = None
        self._set_quick_replies([])
        self.flow.transition(FlowMode.NORMAL, reason=f"check-in complete ({len(record.answers)} answers)")
        self._emit("flow_mode", self.flow.mode)

    # ── LLM Calls ────────────────────────────────────────────────

    @contextmanager
    def _busy(self):
        self._set_busy(True)
        try:
            yield
        finally:
            self._set_busy(False)

    async def _send(self, messages: list[Message]) -> LLMResult:
        with self._busy():
            return await self.llm.send(messages)

    async def _send_with(self, request, *args) -> LLMResult:
        with self._busy():
            return await request(self.llm, *args)

    # ── History ──────────────────────────────────────────────────

    def _append(self, message: Message) -> None:
        self.messages.append(message)
        self.context.append(message)
        self._emit("message", message)

    def _append_assistant(self, content: str) -> None:
        self._append(Message(role="assistant", content=content))

    def _append_error(self, error: str | None) -> None:
        notice = Message(role="assistant", content=f"Error: {error or 'Unknown error'}")
        self.messages.append(notice)
        self._emit("message", notice)

    def _set_busy(self, busy: bool) -> None:
        self.busy = busy
        self._emit("busy", busy)

    def _set_quick_replies(self, replies: list[str]) -> None:
        self.quick_replies = replies
        self._emit("quick_replies", list(replies))
