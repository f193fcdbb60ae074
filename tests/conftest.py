"""
Shared test fixtures and configuration for pytest.

The settings singleton is built at import time and requires
``GOOGLE_API_KEY``, so a dummy key is set before any ``reel`` module
is imported.  No test talks to Gemini: embeddings come from a hashed
bag-of-words fake and answers from a scripted streaming fake.
"""

import hashlib
import math
import os
import re

os.environ.setdefault("GOOGLE_API_KEY", "test-key-0000")
os.environ.setdefault("ENV", "prod")

import pytest
from langchain_core.messages import AIMessageChunk

from reel.src.core.models import CorpusRecord


TEST_DIMENSIONS = 256
_TOKEN_RE = re.compile(r"[a-z0-9]+")


# ============================================================================
# Fake services
# ============================================================================

class HashingEmbedder:
    """
    Deterministic bag-of-words embedder.

    Tokens are lower-cased and cut to their first five letters so that
    "steals" and "stealing" land in the same bucket.  Vectors are
    L2-normalised; identical text always yields an identical vector.
    """

    def __init__(self, dimensions: int = TEST_DIMENSIONS):
        self.dimensions = dimensions
        self.query_calls = []
        self.document_calls = []

    def _embed(self, text):
        vector = [0.0] * self.dimensions
        for token in _TOKEN_RE.findall(text.lower()):
            bucket = int(hashlib.md5(token[:5].encode("utf-8")).hexdigest(), 16) % self.dimensions
            vector[bucket] += 1.0
        norm = math.sqrt(sum(x * x for x in vector)) or 1.0
        return [x / norm for x in vector]

    def embed_query(self, text):
        self.query_calls.append(text)
        return self._embed(text)

    def embed_documents(self, texts):
        self.document_calls.append(list(texts))
        return [self._embed(t) for t in texts]


class ScriptedChatModel:
    """Streams a fixed list of fragments as ``AIMessageChunk``s, optionally failing midway."""

    def __init__(self, fragments=None, fail_after=None):
        self.fragments = list(fragments if fragments is not None else ["Hello", ", ", "world."])
        self.fail_after = fail_after
        self.calls = []

    def stream(self, input, **kwargs):
        self.calls.append(list(input))
        for i, fragment in enumerate(self.fragments):
            if self.fail_after is not None and i == self.fail_after:
                raise ConnectionError("stream dropped")
            yield AIMessageChunk(content=fragment)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def embedder():
    return HashingEmbedder()


@pytest.fixture
def chat_model():
    return ScriptedChatModel()


@pytest.fixture
def make_chat_model():
    """Factory for scripted chat models with custom fragments or failure points."""
    return ScriptedChatModel


@pytest.fixture
def scenario_movies():
    """The two-movie corpus used by the retrieval scenarios."""
    return [
        CorpusRecord(id="inception", title="Inception", description="a thief who steals secrets via dreams", reference="ref1"),
        CorpusRecord(id="up", title="Up", description="an old man flies his house with balloons", reference="ref2"),
    ]


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "lancedb")
