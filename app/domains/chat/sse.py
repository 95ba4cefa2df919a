"""Server-Sent Events framing for the streaming chat endpoint."""

import logging
from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

DONE_EVENT = "data:[DONE]\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def escape_newlines(text: str) -> str:
    """Replace each newline with the two characters ``\\n`` so a payload stays on one line."""
    return text.replace("\n", "\\n")


def format_token_event(token: str) -> str:
    """Frame one token as its own ``data:`` event."""
    return f"data:{escape_newlines(token)}\n\n"


def format_error_event(message: str) -> str:
    return f"event: error\ndata: {escape_newlines(message)}\n\n"


async def relay_events(tokens: AsyncIterator[str]) -> AsyncIterator[str]:
    """Turn a token stream into SSE frames.

    Tokens are forwarded in arrival order. A normal end of ``tokens`` is
    followed by the ``[DONE]`` frame; a failure yields a single ``error`` event
    instead. When the client disconnects, ``tokens`` is closed right away.
    """
    try:
        async for token in tokens:
            yield format_token_event(token)
    except Exception as e:  # pylint: disable=broad-exception-caught
        message = getattr(e, "message", None) or str(e)
        logger.error("Chat stream failed: %s", message)
        yield format_error_event(message)
        return
    finally:
        aclose = getattr(tokens, "aclose", None)
        if aclose is not None:
            await aclose()

    yield DONE_EVENT
