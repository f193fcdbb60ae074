"""
Reel - Database Setup & Ingestion Script
==========================================
CLI entry point that orchestrates:
    1. Validate that ``GOOGLE_API_KEY`` is set (fail-fast).
    2. Initialise ``MovieVectorStore`` (optionally drop the existing table).
    3. Load the movie corpus and run ``IngestionManager``.
    4. Print a structured execution summary with timing breakdown.

Ingestion is "ingest once": without ``--drop`` an existing table is
left untouched and the summary reports it as skipped.

Flags:
    --drop       Drop the LanceDB table, then re-ingest the corpus.
    --drop-only  Drop the table and exit immediately (no ingestion).
    --corpus     Ingest from a different JSON corpus file.

Usage:
    python -m reel.scripts.setup_db              # Seed on first run
    python -m reel.scripts.setup_db --drop       # Drop table, re-ingest
    python -m reel.scripts.setup_db --drop-only  # Drop table and exit
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# ── Ensure project root is importable when run directly ────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


# ── CLI Argument Parsing ───────────────────────────────────────────────

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="setup_db", description="Reel — Initialise the movie vector table and run one-time ingestion.")
    parser.add_argument("--drop", action="store_true", default=False, help="Drop the LanceDB table before ingesting.")
    parser.add_argument("--drop-only", action="store_true", default=False, help="Drop the LanceDB table and exit (no ingestion).")
    parser.add_argument("--corpus", type=Path, default=None, help="Path to a JSON corpus file (defaults to CORPUS_PATH).")
    return parser.parse_args(argv)


# ── Main Orchestration ─────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    t_start = time.perf_counter()

    # ── 0. Load settings + .env (timed) ────────────────────────────────
    t_settings = time.perf_counter()
    try:
        from reel.config.settings import settings
    except Exception as exc:
        print("\n[FATAL] Configuration error — check your .env file:\n")
        print(f"  {exc}")
        print()
        sys.exit(1)
    settings_ms = (time.perf_counter() - t_settings) * 1000

    from reel.src.utils.logger import get_logger
    logger = get_logger(__name__)

    logger.info("Settings loaded in %.1fms", settings_ms)
    _print_header(settings)

    # ── 1. Initialise LanceDB store (timed) ────────────────────────────
    from reel.src.database.vector_store import MovieVectorStore

    t_lancedb = time.perf_counter()
    store = MovieVectorStore()
    lancedb_ms = (time.perf_counter() - t_lancedb) * 1000
    logger.info("LanceDB connection established in %.1fms", lancedb_ms)

    if args.drop or args.drop_only:
        logger.warning("Dropping table '%s' as requested.", settings.LANCEDB_TABLE_NAME)
        store.drop_collection()

        if args.drop_only:
            logger.info("--drop-only: Table dropped. Exiting.")
            _print_footer(0, 0, False, time.perf_counter() - t_start, settings_ms, 0.0, lancedb_ms)
            return

    # ── 2. Initialise embedder (timed) ─────────────────────────────────
    from reel.src.core.providers import build_embedder

    t_embedder = time.perf_counter()
    try:
        embedder = build_embedder()
    except Exception:
        logger.exception("Failed to initialise embedding model.")
        sys.exit(1)
    embedder_ms = (time.perf_counter() - t_embedder) * 1000

    # ── 3. Load corpus + ingest ────────────────────────────────────────
    from reel.src.core.exceptions import IngestionError
    from reel.src.core.ingestor import IngestionManager, load_corpus

    try:
        records = load_corpus(args.corpus)
        summary = IngestionManager(vector_store=store, embedder=embedder).ensure_ingested(records)
    except IngestionError as exc:
        logger.error("Ingestion failed: %s", exc)
        sys.exit(1)

    # ── 4. Print execution summary ─────────────────────────────────────
    elapsed = time.perf_counter() - t_start
    _print_footer(summary["total_records"], summary["records_ingested"], summary["skipped"], elapsed, settings_ms, embedder_ms, lancedb_ms)


# ── Pretty-print helpers ──────────────────────────────────────────────

def _print_header(settings: object) -> None:
    api_key_val = settings.GOOGLE_API_KEY.get_secret_value()  # type: ignore[attr-defined]
    masked = f"****{api_key_val[-4:]}" if len(api_key_val) > 4 else "****"

    print()
    print("=" * 60)
    print("  REEL — Movie Vector Table Setup & Ingestion")
    print("=" * 60)
    print(f"  Environment  : {settings.ENV}")                      # type: ignore[attr-defined]
    print(f"  Embedding    : {settings.EMBEDDING_MODEL} ({settings.EMBEDDING_DIMENSIONS} dims)")  # type: ignore[attr-defined]
    print(f"  LanceDB path : {settings.LANCEDB_PATH}")             # type: ignore[attr-defined]
    print(f"  Table        : {settings.LANCEDB_TABLE_NAME}")       # type: ignore[attr-defined]
    print(f"  Corpus       : {settings.CORPUS_PATH}")              # type: ignore[attr-defined]
    print(f"  Batch size   : {settings.INGEST_BATCH_SIZE}")        # type: ignore[attr-defined]
    print(f"  API Key      : {masked}")
    print("=" * 60)
    print()


def _print_footer(total_records: int, ingested: int, skipped: bool, elapsed: float, settings_ms: float, embedder_ms: float, lancedb_ms: float) -> None:
    startup_ms = settings_ms + embedder_ms + lancedb_ms
    processing_s = max(elapsed - (startup_ms / 1000), 0.0)

    print()
    print("=" * 60)
    print("  EXECUTION SUMMARY")
    print("-" * 60)
    print(f"  Corpus records       : {total_records}")
    print(f"  Records ingested     : {ingested}")
    print(f"  Skipped (table found): {'yes' if skipped else 'no'}")
    print("-" * 60)
    print("  TIMING BREAKDOWN")
    print("-" * 60)
    print(f"  Settings + .env load : {settings_ms:>8.1f}ms")
    print(f"  Embedder init        : {embedder_ms:>8.1f}ms")
    print(f"  LanceDB connection   : {lancedb_ms:>8.1f}ms")
    print(f"  Startup time (total) : {startup_ms:>8.1f}ms")
    print(f"  Processing time      : {processing_s:>8.2f}s")
    print(f"  Total elapsed        : {elapsed:>8.2f}s")
    print("=" * 60)
    print()


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    main()
