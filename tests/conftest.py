"""Shared test fixtures for the SwitchUp test suite.

Provides a scripted fake LLM and a Storage rooted in a temp directory.
"""

import pytest

from switchup.agent.llm import LLMResult
from switchup.memory.storage import Storage


class FakeLLM:
    """Scripted stand-in for GeminiChat.

    Each queued item is either reply text or an LLMResult (for failures).
    Every call records the messages it was sent.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[list] = []

    def queue(self, *replies) -> None:
        self.replies.extend(replies)

    async def send(self, messages):
        self.calls.append(list(messages))
        if not self.replies:
            return LLMResult(error="no scripted reply")
        reply = self.replies.pop(0)
        if isinstance(reply, LLMResult):
            return reply
        return LLMResult(text=reply)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def storage(tmp_path):
    return Storage(data_dir=tmp_path / "data")
