"""
Reel - IngestionManager
========================
Seeds the movie table from the static corpus file exactly once.

Key design decisions:
    • **Ingest once** – if the table already exists the run is a no-op:
      no embedding call, no upsert.  Re-ingestion is an explicit action
      (``setup_db --drop``).
    • **Dependency Injection** – receives ``MovieVectorStore`` + embedder.
    • **Corpus order** – records are embedded and upserted strictly in
      file order, in sequential batches of ``INGEST_BATCH_SIZE``.
    • **Fail fast** – the first embedding or upsert failure aborts the
      run with ``IngestionError``.  Records already written stay in the
      table; there is no rollback.

Usage:
    from reel.src.core.ingestor import IngestionManager, load_corpus
    manager = IngestionManager(store, embedder)
    summary = manager.ensure_ingested(load_corpus())
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from reel.config.settings import settings
from reel.src.core.exceptions import EmbeddingError, IngestionError
from reel.src.core.models import CorpusRecord
from reel.src.core.providers import Embedder
from reel.src.core.retrieval import validate_vector
from reel.src.database.vector_store import MovieVectorStore
from reel.src.utils.logger import get_logger
from reel.src.utils.text_utils import clean_field

logger = get_logger(__name__)

_CORPUS_ADAPTER = TypeAdapter(list[CorpusRecord])
_TEXT_FIELDS = ("title", "description", "reference")


# ══════════════════════════════════════════════════════════════════════
#  CORPUS LOADING
# ══════════════════════════════════════════════════════════════════════

def _clean_item(item: dict[str, Any]) -> dict[str, Any]:
    """Clean string text fields; drop ``null`` ones so model defaults apply."""
    cleaned = {k: v for k, v in item.items() if not (k in _TEXT_FIELDS and v is None)}
    for k in _TEXT_FIELDS:
        if isinstance(cleaned.get(k), str):
            cleaned[k] = clean_field(cleaned[k])
    return cleaned


def load_corpus(path: Path | None = None) -> list[CorpusRecord]:
    """
    Read and validate the static movie corpus.

    The file is a JSON array of objects with ``title``, ``description``,
    ``reference`` and an optional ``id``.  String text fields are cleaned
    with ``clean_field``; a ``null`` field counts as absent.

    Raises
    ------
    IngestionError
        If the file is missing, is not valid JSON, fails validation, or
        repeats an ``id``.
    """
    corpus_path = Path(path or settings.CORPUS_PATH)
    try:
        raw = json.loads(corpus_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise IngestionError(f"Cannot read corpus file {corpus_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise IngestionError(f"Corpus file {corpus_path} is not valid JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise IngestionError(f"Corpus file {corpus_path} must contain a JSON array.")

    cleaned = [_clean_item(item) if isinstance(item, dict) else item for item in raw]

    try:
        records = _CORPUS_ADAPTER.validate_python(cleaned)
    except ValidationError as exc:
        raise IngestionError(f"Corpus file {corpus_path} failed validation: {exc}") from exc

    seen: set[str] = set()
    for record in records:
        if record.id in seen:
            raise IngestionError(f"Duplicate record id '{record.id}' in {corpus_path}.")
        seen.add(record.id)

    logger.info("[INGEST] Loaded %d record(s) from %s", len(records), corpus_path)
    return records


# ══════════════════════════════════════════════════════════════════════
#  INGESTION
# ══════════════════════════════════════════════════════════════════════

class IngestionManager:
    """
    One-time corpus seeding: embed each description → upsert record.

    Parameters
    ----------
    vector_store
        An initialised ``MovieVectorStore`` instance (injected).
    embedder
        An embedding model exposing ``embed_documents``.
    batch_size
        Records per embedding call.  Defaults to ``settings.INGEST_BATCH_SIZE``.
    """

    __slots__ = ("_store", "_embedder", "_batch_size")

    def __init__(self, vector_store: MovieVectorStore, embedder: Embedder, batch_size: int | None = None) -> None:
        self._store = vector_store
        self._embedder = embedder
        self._batch_size = settings.INGEST_BATCH_SIZE if batch_size is None else batch_size
        if self._batch_size < 1:
            raise ValueError(f"batch_size must be ≥ 1, got {self._batch_size}")


    def ensure_ingested(self, records: list[CorpusRecord]) -> dict[str, Any]:
        """
        Seed the table unless it already exists.

        Returns
        -------
        dict
            ``total_records``, ``records_ingested``, ``skipped``,
            ``elapsed_seconds``.

        Raises
        ------
        IngestionError
            If any record cannot be embedded or upserted.
        """
        t_start = time.perf_counter()

        if self._store.collection_exists():
            logger.info("[INGEST] Table '%s' already exists (%d rows) — skipping ingestion.", self._store.table_name, self._store.count())
            return self._summary(len(records), 0, True, time.perf_counter() - t_start)

        self._store.create_collection_if_absent()
        logger.info("[INGEST] Seeding %d record(s) in batches of %d …", len(records), self._batch_size)

        ingested = 0
        for start in range(0, len(records), self._batch_size):
            batch = records[start : start + self._batch_size]
            try:
                embedded = self._embed_batch(batch)
                ingested += self._store.upsert(embedded)
            except Exception as exc:
                logger.error("[INGEST] Aborted at record %d/%d ('%s'): %s — table left with %d record(s).", start + 1, len(records), batch[0].title, exc, ingested)
                raise IngestionError(f"Ingestion failed at record {start + 1}: {exc}", records_ingested=ingested) from exc

        elapsed = time.perf_counter() - t_start
        logger.info("[INGEST] Complete — %d record(s) stored in %.2fs.", ingested, elapsed)
        return self._summary(len(records), ingested, False, elapsed)


    def _embed_batch(self, batch: list[CorpusRecord]) -> list[CorpusRecord]:
        """Embed the descriptions of *batch* and return the embedded copies."""
        vectors = self._embedder.embed_documents([record.description for record in batch])
        if len(vectors) != len(batch):
            raise EmbeddingError(f"Expected {len(batch)} vectors, got {len(vectors)}.")
        return [record.with_embedding(validate_vector(vector)) for record, vector in zip(batch, vectors)]


    @staticmethod
    def _summary(total: int, ingested: int, skipped: bool, elapsed: float) -> dict[str, Any]:
        return {
            "total_records": total,
            "records_ingested": ingested,
            "skipped": skipped,
            "elapsed_seconds": round(elapsed, 2),
        }
