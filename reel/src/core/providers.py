"""
Reel - Model Providers
=======================
Structural types for the two external model services, plus factories
that build the production Gemini clients via LangChain.

Everything downstream depends only on the protocols, so tests inject
deterministic fakes and never touch the network.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, Protocol, runtime_checkable

from reel.config.settings import settings
from reel.src.utils.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class Embedder(Protocol):
    """Structural type for any LangChain-compatible embedding model."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]: ...

    def embed_query(self, text: str) -> list[float]: ...


@runtime_checkable
class StreamingChatModel(Protocol):
    """Anything exposing LangChain's ``stream(messages)`` → message chunks."""

    def stream(self, input: Sequence[Any], **kwargs: Any) -> Iterator[Any]: ...


def build_embedder() -> Embedder:
    """Initialise the Gemini embedding model via LangChain."""
    from langchain_google_genai import GoogleGenerativeAIEmbeddings

    embedder = GoogleGenerativeAIEmbeddings(model=settings.EMBEDDING_MODEL, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
    logger.info("Embedder initialised: %s", settings.EMBEDDING_MODEL)
    return embedder


def build_chat_model() -> StreamingChatModel:
    """Initialise the Gemini chat model via LangChain."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    llm = ChatGoogleGenerativeAI(model=settings.LLM_MODEL, temperature=settings.LLM_TEMPERATURE, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
    logger.info("LLM initialised: %s (temperature=%.1f)", settings.LLM_MODEL, settings.LLM_TEMPERATURE)
    return llm
