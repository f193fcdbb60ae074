"""
Reel - RAG Engine
==================
Drives one question/answer turn of the movie assistant.

Architecture (OOP)
------------------
``RetrievalEngine``
    Query embedding + top-K search → context entries and references.
``ConversationMemory``
    Per-session chronological log of queries and answers.
``PromptAssembler``
    Context + memory + rules + question → ``GenerationRequest``.
``ChatStreamer``
    ``GenerationRequest`` → lazily streamed text fragments.
``ResponseSession``
    Owns one ``ConversationMemory`` and runs the turn:
        1. Blank query → no-op (no service is called)
        2. Retrieve → context entries + references
        3. Build prompt from the memory *as it was before this turn*
        4. Record the query in memory
        5. Stream the answer, surfacing every fragment immediately
        6. Record the trimmed answer in memory
        7. Return answer + references

Failure semantics
-----------------
A failing retrieval leaves memory untouched.  A turn that breaks off
while streaming (a ``GenerationError`` or an exception raised by the
fragment callback) leaves the query recorded without an answer, unless
the session runs in transactional mode, in which case the query is
removed again before the exception propagates unchanged.

Usage:
    from reel.src.core.rag_engine import ResponseSession
    session = ResponseSession(retriever, streamer)
    result = session.ask("Which movie is about dreams?", on_fragment=print)
"""

from __future__ import annotations

import time
from collections.abc import Callable

from reel.config.settings import settings
from reel.src.core.exceptions import GenerationError
from reel.src.core.generation import ChatStreamer
from reel.src.core.memory import ConversationMemory
from reel.src.core.models import TurnResult
from reel.src.core.prompt_builder import PromptAssembler
from reel.src.core.retrieval import RetrievalEngine
from reel.src.utils.logger import get_logger
from reel.src.utils.text_utils import is_blank

logger = get_logger(__name__)

FragmentCallback = Callable[[str], None]


class ResponseSession:
    """
    One interactive conversation over the movie corpus.

    Parameters
    ----------
    retriever
        An initialised ``RetrievalEngine``.
    streamer
        A ``ChatStreamer`` wrapping the chat model.
    memory
        Optional pre-existing ``ConversationMemory``; a fresh one is
        created otherwise.  Sessions never share memory implicitly.
    assembler
        Optional custom ``PromptAssembler``.
    transactional_memory
        Drop the recorded query when generation fails.  Defaults to
        ``settings.TRANSACTIONAL_MEMORY``.
    """

    __slots__ = ("_retriever", "_streamer", "_memory", "_assembler", "_transactional")

    def __init__(self, retriever: RetrievalEngine, streamer: ChatStreamer, memory: ConversationMemory | None = None, assembler: PromptAssembler | None = None, transactional_memory: bool | None = None) -> None:
        self._retriever = retriever
        self._streamer = streamer
        self._memory = memory if memory is not None else ConversationMemory()
        self._assembler = assembler or PromptAssembler()
        self._transactional = settings.TRANSACTIONAL_MEMORY if transactional_memory is None else transactional_memory

    @property
    def memory(self) -> ConversationMemory:
        return self._memory


    def ask(self, query: str, on_fragment: FragmentCallback | None = None) -> TurnResult | None:
        """
        Answer *query*.

        Parameters
        ----------
        query
            The user's question.  Blank input returns ``None`` without
            calling any service.
        on_fragment
            Called with each answer fragment the moment it arrives.

        Returns
        -------
        TurnResult | None
            The full streamed answer and the de-duplicated references.

        Raises
        ------
        EmbeddingError, SearchError
            Retrieval failed; nothing was recorded.
        GenerationError
            The answer stream failed; see module docstring for memory effects.
        """
        if is_blank(query):
            logger.debug("[RAG] Blank query ignored.")
            return None

        t_start = time.perf_counter()

        # ── 1. Retrieve ───────────────────────────────────────────────
        retrieval = self._retriever.retrieve(query)

        # ── 2. Build prompt from pre-turn memory ──────────────────────
        request = self._assembler.build_request(retrieval.context_entries, self._memory.get_messages(), query)

        # ── 3. Record query ───────────────────────────────────────────
        self._memory.add_message(query)

        # ── 4. Stream + accumulate ────────────────────────────────────
        t_llm = time.perf_counter()
        fragments: list[str] = []
        try:
            for fragment in self._streamer.stream(request):
                fragments.append(fragment)
                if on_fragment is not None:
                    on_fragment(fragment)
        except GenerationError as exc:
            exc.partial_answer = "".join(fragments)
            self._abandon_turn("Generation failed")
            raise
        except BaseException:
            self._abandon_turn("Turn aborted while streaming")
            raise

        answer = "".join(fragments)
        llm_ms = (time.perf_counter() - t_llm) * 1000

        # ── 5. Record answer ──────────────────────────────────────────
        self._memory.add_message(answer)

        total_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RAG] Turn complete: %d chars, %d reference(s) in %.1fms (llm=%.1fms)", len(answer), len(retrieval.references), total_ms, llm_ms)
        return TurnResult(answer=answer, references=retrieval.references)


    def _abandon_turn(self, reason: str) -> None:
        """Handle a recorded query whose answer will never arrive."""
        if self._transactional:
            self._memory.discard_last()
            logger.warning("[RAG] %s; query removed from memory (transactional mode).", reason)
        else:
            logger.warning("[RAG] %s; query kept in memory without an answer.", reason)
