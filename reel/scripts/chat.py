"""
Reel - Interactive Movie Chat
==============================
Console entry point that orchestrates:
    1. Validate settings (fail-fast on a missing ``GOOGLE_API_KEY``).
    2. Initialise the embedder and ``MovieVectorStore``.
    3. Seed the movie table on first run (``IngestionManager``).
    4. Run the question/answer loop until ``quit``, EOF or Ctrl-C.

Per turn the answer is streamed to stdout fragment by fragment, followed
by the references behind it.  A turn that fails is reported and the loop
keeps going; the conversation memory lives until the process exits.

Usage:
    reel-chat
    python -m reel.scripts.chat
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, TextIO

# ── Ensure project root is importable when run directly ────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from reel.config.prompt_templates import FAREWELL_MESSAGE, INPUT_PROMPT, QUIT_COMMAND, REFERENCES_HEADER, TURN_FAILED_MESSAGE, WELCOME_MESSAGE
from reel.src.core.exceptions import ReelError
from reel.src.core.models import TurnResult
from reel.src.utils.text_utils import is_blank


class ChatSession(Protocol):
    """Anything that answers one turn the way ``ResponseSession.ask`` does."""

    def ask(self, query: str, on_fragment: Callable[[str], None] | None = None) -> TurnResult | None: ...


# ── Conversation Loop ──────────────────────────────────────────────────

def run_chat_loop(session: ChatSession, read_line: Callable[[str], str] = input, out: TextIO | None = None) -> int:
    """
    Read questions until the user quits; return the number of answered turns.

    Parameters
    ----------
    session
        A ``ResponseSession`` or any other ``ChatSession``.
    read_line
        Prompt-and-read function, ``input`` by default.
    out
        Where answers and references are written.  Defaults to ``sys.stdout``.
    """
    # get_logger reads settings; main() must be able to report a bad config first.
    from reel.src.utils.logger import get_logger

    logger = get_logger(__name__)
    out = out or sys.stdout

    def _emit(fragment: str) -> None:
        out.write(fragment)
        out.flush()

    out.write(WELCOME_MESSAGE + "\n")
    answered = 0

    while True:
        try:
            line = read_line(INPUT_PROMPT)
        except (EOFError, KeyboardInterrupt):
            out.write("\n" + FAREWELL_MESSAGE + "\n")
            break

        if is_blank(line):
            continue

        if line.strip().lower() == QUIT_COMMAND:
            out.write(FAREWELL_MESSAGE + "\n")
            break

        try:
            result = session.ask(line, on_fragment=_emit)
        except ReelError as exc:
            logger.error("Turn failed: %s", exc)
            out.write(TURN_FAILED_MESSAGE.format(error=type(exc).__name__) + "\n")
            continue

        if result is None:
            continue
        answered += 1

        if result.references:
            out.write(REFERENCES_HEADER + "\n")
            for reference in result.references:
                out.write(f"- {reference}\n")

        out.write("\n\n")
        out.flush()

    return answered


# ── Main Orchestration ─────────────────────────────────────────────────

def main() -> None:
    try:
        from reel.config.settings import settings
    except Exception as exc:
        print("\n[FATAL] Configuration error — check your .env file:\n", file=sys.stderr)
        print(f"  {exc}", file=sys.stderr)
        sys.exit(1)

    from reel.src.core.exceptions import IngestionError
    from reel.src.core.generation import ChatStreamer
    from reel.src.core.ingestor import IngestionManager, load_corpus
    from reel.src.core.providers import build_chat_model, build_embedder
    from reel.src.core.rag_engine import ResponseSession
    from reel.src.core.retrieval import RetrievalEngine
    from reel.src.database.vector_store import MovieVectorStore
    from reel.src.utils.logger import get_logger

    logger = get_logger(__name__)

    try:
        embedder = build_embedder()
        llm = build_chat_model()
    except Exception:
        logger.exception("Failed to initialise Gemini models.")
        sys.exit(1)

    store = MovieVectorStore()

    try:
        IngestionManager(vector_store=store, embedder=embedder).ensure_ingested(load_corpus())
    except IngestionError as exc:
        logger.error("Startup ingestion failed: %s", exc)
        sys.exit(1)

    logger.info("VectorStore ready — table '%s' (%d rows).", settings.LANCEDB_TABLE_NAME, store.count())

    session = ResponseSession(RetrievalEngine(store, embedder), ChatStreamer(llm))
    try:
        run_chat_loop(session)
    except BrokenPipeError:
        logger.warning("Output stream closed; ending the chat.")
        sys.exit(1)


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    main()
