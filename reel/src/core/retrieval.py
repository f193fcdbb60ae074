"""
Reel - RetrievalEngine
=======================
Embeds the user's question, runs a fixed top-K similarity search against
the movie table, and renders the hits two ways:

``context_entries``
    ``[Title]: description 'reference'`` — fed to the prompt.
``references``
    ``[87.31%] reference`` — shown to the user after the answer.

Both lists are de-duplicated by exact string equality and keep the
order of the search results (best hit first).  Two hits that render to
the same context line collapse even if they are different records; two
references with the same URL but different percentages are both kept.
"""

from __future__ import annotations

import math
import time

from reel.config.prompt_templates import CONTEXT_ENTRY_TEMPLATE, REFERENCE_TEMPLATE
from reel.config.settings import settings
from reel.src.core.exceptions import EmbeddingError, SearchError
from reel.src.core.models import RetrievalResult, SearchHit
from reel.src.core.providers import Embedder
from reel.src.database.vector_store import VECTOR_FIELD, MovieVectorStore
from reel.src.utils.logger import get_logger
from reel.src.utils.text_utils import unique_in_order

logger = get_logger(__name__)


def format_context_entry(hit: SearchHit) -> str:
    record = hit.record
    return CONTEXT_ENTRY_TEMPLATE.format(title=record.title, description=record.description, reference=record.reference)


def format_reference(hit: SearchHit) -> str:
    """Render ``score * 100`` with two decimals next to the record's reference."""
    return REFERENCE_TEMPLATE.format(percent=f"{hit.score * 100:.2f}", reference=hit.record.reference)


def embed_text(embedder: Embedder, text: str) -> list[float]:
    """
    Embed *text* as a query and validate the returned vector.

    Raises
    ------
    EmbeddingError
        If the service call fails or returns an empty / non-numeric vector.
    """
    try:
        vector = embedder.embed_query(text)
    except Exception as exc:
        logger.error("[RETRIEVAL] Failed to embed query: %s", exc)
        raise EmbeddingError(f"Embedding service failed: {exc}") from exc
    return validate_vector(vector)


def validate_vector(vector: object) -> list[float]:
    """Coerce an embedding to ``list[float]`` or raise ``EmbeddingError``."""
    try:
        values = [float(x) for x in vector]  # type: ignore[union-attr]
    except (TypeError, ValueError) as exc:
        raise EmbeddingError(f"Malformed embedding returned: {type(vector).__name__}") from exc
    if not values:
        raise EmbeddingError("Embedding service returned an empty vector.")
    if not all(math.isfinite(x) for x in values):
        raise EmbeddingError("Embedding contains non-finite values.")
    return values


class RetrievalEngine:
    """
    Query → (context entries, references).

    Parameters
    ----------
    vector_store
        An initialised ``MovieVectorStore``.
    embedder
        An ``Embedder``-compatible object for query embedding.
    default_k
        Search width used when ``retrieve`` is called without *k*.
        Defaults to ``settings.SEARCH_RESULTS_LIMIT``.
    """

    __slots__ = ("_store", "_embedder", "_default_k")

    def __init__(self, vector_store: MovieVectorStore, embedder: Embedder, default_k: int | None = None) -> None:
        self._store = vector_store
        self._embedder = embedder
        self._default_k = settings.SEARCH_RESULTS_LIMIT if default_k is None else default_k


    def retrieve(self, query: str, k: int | None = None) -> RetrievalResult:
        """
        Run one retrieval.

        Raises
        ------
        ValueError
            If *k* is smaller than 1.
        EmbeddingError
            If the query cannot be embedded.
        SearchError
            If the vector store search fails.
        """
        k = self._default_k if k is None else k
        if k < 1:
            raise ValueError(f"k must be ≥ 1, got {k}")

        t_start = time.perf_counter()
        query_vector = embed_text(self._embedder, query)

        try:
            hits = self._store.search(query_vector, k=k, vector_field=VECTOR_FIELD)
        except Exception as exc:
            logger.error("[RETRIEVAL] Vector search failed: %s", exc)
            raise SearchError(f"Vector search failed: {exc}") from exc

        context_entries = unique_in_order(format_context_entry(hit) for hit in hits)
        references = unique_in_order(format_reference(hit) for hit in hits)

        elapsed_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RETRIEVAL] %d hit(s) → %d context entr(ies), %d reference(s) in %.1fms", len(hits), len(context_entries), len(references), elapsed_ms)
        return RetrievalResult(context_entries=context_entries, references=references, hits=hits)
