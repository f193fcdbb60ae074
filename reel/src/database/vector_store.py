"""
Reel - MovieVectorStore
========================
OOP wrapper around LanceDB providing the corpus-store contract:
  • Idempotent table creation with a strict PyArrow schema
  • Record upsert keyed on ``id`` (``merge_insert``)
  • Top-K cosine similarity search returning scored ``SearchHit``s

Design decisions:
  • **Singleton DB connection** — ``_get_connection()`` caches the
    ``lancedb.DBConnection`` per path to avoid file-lock issues.
  • **No embedder inside** — callers embed text themselves and pass
    vectors in, so the store never talks to the embedding service.
  • **Scores, not distances** — LanceDB reports cosine *distance*;
    ``search`` converts it to ``score = 1 - distance`` (higher = closer)
    and does not renormalise further.

Usage:
    from reel.src.database.vector_store import MovieVectorStore
    store = MovieVectorStore()
    store.create_collection_if_absent()
    store.upsert([record.with_embedding(vector)])
    hits = store.search(query_vector, k=10)
"""

from __future__ import annotations

import threading

import lancedb
import pyarrow as pa

from reel.config.settings import settings
from reel.src.core.models import CorpusRecord, SearchHit
from reel.src.utils.logger import get_logger

logger = get_logger(__name__)

# ── Constants ──────────────────────────────────────────────────────────
VECTOR_FIELD = "description_embedding"
_DB_LOCK = threading.Lock()
_db_connection_cache: dict[str, lancedb.DBConnection] = {}


def movie_schema(dimensions: int) -> pa.Schema:
    """LanceDB table schema; the vector column is a fixed-width float32 list."""
    return pa.schema([
        pa.field("id", pa.utf8(), nullable=False),
        pa.field("title", pa.utf8()),
        pa.field("description", pa.utf8()),
        pa.field("reference", pa.utf8()),
        pa.field(VECTOR_FIELD, pa.list_(pa.float32(), dimensions)),
    ])


def _get_connection(db_path: str) -> lancedb.DBConnection:
    """
    Return a **singleton** ``lancedb.DBConnection`` for *db_path*.

    Thread-safe via ``_DB_LOCK``.
    """
    if db_path not in _db_connection_cache:
        with _DB_LOCK:
            if db_path not in _db_connection_cache:
                logger.info("Opening new LanceDB connection: %s", db_path)
                _db_connection_cache[db_path] = lancedb.connect(db_path)
    return _db_connection_cache[db_path]


class MovieVectorStore:
    """
    High-level abstraction over the LanceDB movie table.

    Parameters
    ----------
    db_path
        Override the database directory.  Defaults to ``settings.LANCEDB_PATH``.
    table_name
        Override the table name.  Defaults to ``settings.LANCEDB_TABLE_NAME``.
    dimensions
        Width of the embedding column.  Defaults to ``settings.EMBEDDING_DIMENSIONS``.
    """

    __slots__ = ("_db_path", "_table_name", "_dimensions", "db", "_table")

    def __init__(self, db_path: str | None = None, table_name: str | None = None, dimensions: int | None = None) -> None:
        self._db_path: str = str(db_path or settings.LANCEDB_PATH)
        self._table_name: str = table_name or settings.LANCEDB_TABLE_NAME
        self._dimensions: int = settings.EMBEDDING_DIMENSIONS if dimensions is None else dimensions
        self.db: lancedb.DBConnection = _get_connection(self._db_path)
        self._table: lancedb.table.Table | None = None

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def dimensions(self) -> int:
        return self._dimensions

    # ── Internal ───────────────────────────────────────────────────────

    def _open_table(self) -> lancedb.table.Table | None:
        """Lazily open the table if it exists and cache the handle."""
        if self._table is None and self.collection_exists():
            self._table = self.db.open_table(self._table_name)
        return self._table

    def _to_row(self, record: CorpusRecord) -> dict[str, str | list[float]]:
        if record.embedding is None:
            raise ValueError(f"Record '{record.id}' has no embedding; embed it before upserting.")
        if len(record.embedding) != self._dimensions:
            raise ValueError(f"Record '{record.id}' embedding has {len(record.embedding)} dimensions, table '{self._table_name}' expects {self._dimensions}.")
        return {"id": record.id, "title": record.title, "description": record.description, "reference": record.reference, VECTOR_FIELD: record.embedding}

    # ── Public API ─────────────────────────────────────────────────────

    def collection_exists(self) -> bool:
        return self._table_name in self.db.table_names()


    def create_collection_if_absent(self) -> None:
        """Create the movie table unless it already exists."""
        if self.collection_exists():
            logger.debug("Table '%s' already exists.", self._table_name)
            return
        try:
            self._table = self.db.create_table(self._table_name, schema=movie_schema(self._dimensions), exist_ok=True)
        except OSError as exc:
            logger.error("LanceDB filesystem error creating '%s' at %s: %s", self._table_name, self._db_path, exc)
            raise
        logger.info("Created new table '%s' (%d-dim vectors).", self._table_name, self._dimensions)


    def upsert(self, records: list[CorpusRecord]) -> int:
        """
        Insert or replace records by ``id``.

        Returns
        -------
        int
            Number of records written.

        Raises
        ------
        ValueError
            If a record has no embedding or the wrong dimension.
        RuntimeError
            If the table has not been created.
        """
        if not records:
            return 0
        table = self._open_table()
        if table is None:
            raise RuntimeError(f"Table '{self._table_name}' does not exist. Call create_collection_if_absent() first.")

        rows = [self._to_row(record) for record in records]
        data = pa.Table.from_pylist(rows, schema=movie_schema(self._dimensions))
        table.merge_insert("id").when_matched_update_all().when_not_matched_insert_all().execute(data)

        logger.debug("Upserted %d record(s) into '%s'.", len(rows), self._table_name)
        return len(rows)


    def search(self, vector: list[float], k: int, vector_field: str = VECTOR_FIELD) -> list[SearchHit]:
        """
        Top-*k* cosine similarity search.

        Returns
        -------
        list[SearchHit]
            Hits ordered by descending score.  Empty when the table is
            missing or holds no rows.
        """
        table = self._open_table()
        if table is None or table.count_rows() == 0:
            logger.info("Search on empty table '%s' — no hits.", self._table_name)
            return []

        rows = table.search(list(vector), vector_column_name=vector_field).distance_type("cosine").limit(k).to_list()

        hits = [
            SearchHit(record=CorpusRecord(id=row["id"], title=row["title"], description=row["description"], reference=row["reference"] or "", embedding=[float(x) for x in row[vector_field]]), score=1.0 - float(row["_distance"]))
            for row in rows
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        logger.info("Search returned %d hit(s) (k=%d).", len(hits), k)
        return hits


    def count(self) -> int:
        """Return the total number of rows in the table."""
        table = self._open_table()
        return table.count_rows() if table is not None else 0


    def drop_collection(self) -> None:
        """Drop the movie table (used by ``setup_db --drop``)."""
        if not self.collection_exists():
            logger.warning("Table '%s' does not exist — nothing to drop.", self._table_name)
            return
        try:
            self.db.drop_table(self._table_name)
        except OSError as exc:
            logger.error("Filesystem error dropping table '%s': %s", self._table_name, exc)
            raise
        self._table = None
        logger.info("Dropped table '%s'.", self._table_name)


    def __repr__(self) -> str:
        return f"MovieVectorStore(db='{self._db_path}', table='{self._table_name}', rows={self.count()})"
