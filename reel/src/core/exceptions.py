"""
Reel - Exceptions
==================
Domain errors raised by the RAG pipeline.  Each wraps (``raise ... from``)
the underlying service exception so the original traceback is kept.

None of these are retried or recovered locally: a failure is fatal to the
current turn, or to startup when it happens during ingestion.
"""


class ReelError(Exception):
    """Base exception for all Reel pipeline errors."""


class EmbeddingError(ReelError):
    """
    The embedding service failed.

    Raised when:
    - The service is unreachable or rejects the request
    - The returned vector is empty, non-numeric, or of the wrong shape
    """


class SearchError(ReelError):
    """
    The vector store failed to answer a similarity search.

    Raised when:
    - LanceDB cannot open or query the movie table
    - The query vector does not match the table's vector column
    """


class GenerationError(ReelError):
    """
    The chat model failed before or while streaming an answer.

    Raised when:
    - The service is unreachable
    - The stream aborts mid-flight
    """

    def __init__(self, message: str, partial_answer: str = "") -> None:
        super().__init__(message)
        self.partial_answer = partial_answer


class IngestionError(ReelError):
    """
    One-time corpus seeding failed.

    Raised when:
    - The corpus file is missing or malformed
    - Embedding or upserting any record fails (the table may be left
      partially populated)
    """

    def __init__(self, message: str, records_ingested: int = 0) -> None:
        super().__init__(message)
        self.records_ingested = records_ingested
