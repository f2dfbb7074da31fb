"""Utilities for pulling the structured ```json block out of coach replies."""

import logging
import re

from pydantic import ValidationError

from switchup.memory.models import ParsedPayload

logger = logging.getLogger(__name__)

# Inner content of the first ```json ... ``` fence (non-greedy, spans lines)
_BLOCK_CONTENT = re.compile(r"```json\s*([\s\S]*?)```")
# A whole fenced block, fences included
_BLOCK = re.compile(r"```json[\s\S]*?```")


def extract_structured_block(text: str) -> str | None:
    """Return the trimmed content of the first ```json block, or None."""
    match = _BLOCK_CONTENT.search(text)
    if match is None:
        return None
    return match.group(1).strip()


def strip_structured_blocks(text: str) -> str:
    """Remove every ```json block and return the remaining prose, trimmed."""
    return _BLOCK.sub("", text).strip()


def decode_payload(raw: str) -> ParsedPayload | None:
    """Strictly decode a structured block into a ParsedPayload.

    Malformed JSON, a non-object top level, or any wrongly typed field
    discards the whole block. Nothing is salvaged.
    """
    try:
        return ParsedPayload.model_validate_json(raw, strict=True)
    except ValidationError as e:
        logger.debug("Discarding structured block: %s", e)
        return None
