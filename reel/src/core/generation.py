"""
Reel - ChatStreamer
====================
Turns a ``GenerationRequest`` into the role-tagged LangChain message list
(system instruction, then the assembled prompt) and yields the answer as
text fragments, in emission order, as soon as the model produces them.

The returned iterator is lazy, finite and single-pass: every call to
``stream`` issues a fresh model request.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from reel.src.core.exceptions import GenerationError
from reel.src.core.models import GenerationRequest
from reel.src.core.providers import StreamingChatModel
from reel.src.utils.logger import get_logger

logger = get_logger(__name__)


def chunk_text(chunk: Any) -> str:
    """
    Extract the plain text of one streamed message chunk.

    Handles ``str`` content as well as the list-of-blocks form some chat
    models emit (``[{"type": "text", "text": "..."}]``).
    """
    content = getattr(chunk, "content", chunk)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type", "text") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return ""


class ChatStreamer:
    """
    Streaming front-end for the chat model.

    Parameters
    ----------
    llm
        Any object with LangChain's ``stream(messages)`` method
        (e.g. ``ChatGoogleGenerativeAI``).
    """

    __slots__ = ("_llm",)

    def __init__(self, llm: StreamingChatModel) -> None:
        self._llm = llm


    @staticmethod
    def to_messages(request: GenerationRequest) -> list[SystemMessage | HumanMessage]:
        return [SystemMessage(content=request.system_instruction), HumanMessage(content=request.prompt)]


    def stream(self, request: GenerationRequest) -> Iterator[str]:
        """
        Yield non-empty text fragments of the answer.

        Raises
        ------
        GenerationError
            If the request cannot be started or the stream aborts.
        """
        fragments = 0
        try:
            for chunk in self._llm.stream(self.to_messages(request)):
                text = chunk_text(chunk)
                if text:
                    fragments += 1
                    yield text
        except GenerationError:
            raise
        except Exception as exc:
            logger.error("[GENERATION] Stream aborted after %d fragment(s): %s", fragments, exc)
            raise GenerationError(f"Chat model stream failed: {exc}") from exc

        logger.debug("[GENERATION] Stream complete — %d fragment(s).", fragments)
