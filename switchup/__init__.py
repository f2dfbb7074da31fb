"""SwitchUp: chat-based health coach backed by Gemini."""

from dotenv import load_dotenv

load_dotenv()
