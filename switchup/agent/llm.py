"""LLM backend for SwitchUp using Gemini via the google-genai SDK."""

import logging
from dataclasses import dataclass

from google import genai

from switchup.agent import config
from switchup.memory.models import Message

logger = logging.getLogger(__name__)


def get_client() -> genai.Client:
    """Create a Gemini client using the API key from environment."""
    api_key = config.get_api_key()
    if not api_key:
        raise ValueError("GEMINI_API_KEY not set in environment")
    return genai.Client(api_key=api_key)


@dataclass
class LLMResult:
    """Outcome of one chat call: either reply text or a readable error."""
    text: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


def to_gemini_request(messages: list[Message]) -> tuple[str | None, list[genai.types.Content]]:
    """Split chat messages into a system instruction and Gemini contents.

    System messages are joined into the system instruction; assistant turns
    map to the "model" role.
    """
    system_parts = [m.content for m in messages if m.role == "system"]
    contents = [
        genai.types.Content(
            role="model" if m.role == "assistant" else "user",
            parts=[genai.types.Part(text=m.content)],
        )
        for m in messages
        if m.role != "system"
    ]
    system_instruction = "\n\n".join(system_parts) if system_parts else None
    return system_instruction, contents


class GeminiChat:
    """Multi-turn, non-streaming chat against Gemini.

    One call per `send`; failures come back as `LLMResult.error` instead of
    raising so the conversation can show them and carry on.
    """

    def __init__(
        self,
        client: genai.Client | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ):
        self._client = client
        self.model = model or config.MODEL
        self.temperature = config.TEMPERATURE if temperature is None else temperature

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = get_client()
        return self._client

    async def send(self, messages: list[Message]) -> LLMResult:
        system_instruction, contents = to_gemini_request(messages)
        if not contents:
            return LLMResult(error="Nothing to send")

        try:
            client = self._get_client()
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=genai.types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=self.temperature,
                ),
            )
        except Exception as e:
            logger.warning("Gemini call failed: %s", e)
            return LLMResult(error=str(e) or type(e).__name__)

        text = (response.text or "").strip()
        if not text:
            return LLMResult(error="The coach returned an empty response")
        return LLMResult(text=text)


def test_connection() -> str:
    """Send a test prompt to Gemini and return the response text."""
    client = get_client()
    response = client.models.generate_content(
        model=config.MODEL,
        contents="Say 'SwitchUp connected successfully' and nothing else.",
    )
    return response.text
