"""
Reel - Centralized Configuration
=================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GOOGLE_API_KEY`` is typed as ``SecretStr`` and has **no default value**.
  If the key is missing at startup, Pydantic raises a ``ValidationError``.
  The raw value is never exposed in repr, logs, or tracebacks.

Paths
-----
All filesystem paths are ``Path.resolve()``-d at class level so they
work identically on Windows, WSL, and Linux.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).
    Fields *without* a default are **required**.

    Attributes
    ----------
    GOOGLE_API_KEY : SecretStr
        API key for Google AI Studio (Gemini).  **Required.**
    ENV : Literal["dev", "prod"]
        Environment mode controlling logging verbosity.
    EMBEDDING_MODEL : str
        Model identifier passed to ``GoogleGenerativeAIEmbeddings``.
    EMBEDDING_DIMENSIONS : int
        Output dimension of ``EMBEDDING_MODEL``.  Fixes the width of the
        vector column when the movie table is created.
    LLM_MODEL : str
        Model identifier for the answer-generation LLM.
    LANCEDB_TABLE_NAME : str
        Table (collection) name inside the LanceDB on-disk database.
    CORPUS_PATH : Path
        JSON file holding the static movie records seeded on first run.
    SEARCH_RESULTS_LIMIT : int
        Top-K width of every similarity search.
    INGEST_BATCH_SIZE : int
        Records embedded per call during ingestion (1 = one at a time).
    TRANSACTIONAL_MEMORY : bool
        When true, a turn whose generation fails removes its query from
        the conversation memory instead of leaving it unanswered.
    """

    # ── Resolved Absolute Paths ────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    DATA_RAW_DIR: Path = BASE_DIR / "data" / "raw"
    CORPUS_PATH: Path = DATA_RAW_DIR / "movies.json"
    LANCEDB_PATH: Path = BASE_DIR / "data" / "lancedb"

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"

    # ── API Keys (REQUIRED, no default) ────────────────────────────────
    GOOGLE_API_KEY: SecretStr

    # ── Model Configuration ────────────────────────────────────────────
    EMBEDDING_MODEL: str = "gemini-embedding-001"
    EMBEDDING_DIMENSIONS: int = 3072
    LLM_MODEL: str = "gemini-2.0-flash"
    LLM_TEMPERATURE: float = 0.3

    # ── LanceDB ────────────────────────────────────────────────────────
    LANCEDB_TABLE_NAME: str = "movies"

    # ── Retrieval / Ingestion ──────────────────────────────────────────
    SEARCH_RESULTS_LIMIT: int = 10
    INGEST_BATCH_SIZE: int = 1

    # ── Conversation ───────────────────────────────────────────────────
    TRANSACTIONAL_MEMORY: bool = False

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("EMBEDDING_DIMENSIONS")
    @classmethod
    def _dimensions_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"EMBEDDING_DIMENSIONS must be ≥ 1, got {v}")
        return v


    @field_validator("SEARCH_RESULTS_LIMIT")
    @classmethod
    def _limit_range(cls, v: int) -> int:
        if not 1 <= v <= 100:
            raise ValueError(f"SEARCH_RESULTS_LIMIT must be 1–100, got {v}")
        return v


    @field_validator("INGEST_BATCH_SIZE")
    @classmethod
    def _batch_range(cls, v: int) -> int:
        if not 1 <= v <= 256:
            raise ValueError(f"INGEST_BATCH_SIZE must be 1–256, got {v}")
        return v


    @field_validator("LLM_TEMPERATURE")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"LLM_TEMPERATURE must be 0.0–2.0, got {v}")
        return v

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=Path(__file__).resolve().parent.parent / ".env", env_file_encoding="utf-8", extra="ignore")


# ── Singleton Instance ─────────────────────────────────────────────────
# Import this throughout the project:
#     from reel.config.settings import settings
settings = Settings()
