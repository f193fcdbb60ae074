"""
Reel - Domain Models
=====================
``CorpusRecord`` is validated with pydantic because it crosses the
JSON / LanceDB boundary.  The per-turn value objects are plain frozen
dataclasses: they are built and consumed in-process only.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CorpusRecord(BaseModel):
    """
    One movie in the searchable corpus.

    ``embedding`` stays ``None`` until ingestion assigns the vector of
    ``description``.  Records are immutable; use ``with_embedding`` to
    obtain the ingested copy.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    description: str
    reference: str = ""
    embedding: list[float] | None = None

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def with_embedding(self, vector: list[float]) -> CorpusRecord:
        return self.model_copy(update={"embedding": [float(x) for x in vector]})


@dataclass(frozen=True)
class SearchHit:
    """A record returned by a similarity search, with its score (higher = closer)."""

    record: CorpusRecord
    score: float


@dataclass(frozen=True)
class RetrievalResult:
    """
    Output of one retrieval.

    ``context_entries`` and ``references`` are de-duplicated by exact
    string equality and keep the order in which the search returned
    their hits.
    """

    context_entries: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    hits: list[SearchHit] = field(default_factory=list)


@dataclass(frozen=True)
class GenerationRequest:
    system_instruction: str
    prompt: str


@dataclass(frozen=True)
class TurnResult:
    """The streamed answer of one turn plus the references behind it."""

    answer: str
    references: list[str] = field(default_factory=list)
