"""
Unit tests for MovieVectorStore against a throwaway on-disk LanceDB.
"""

import pytest

from reel.src.core.models import CorpusRecord
from reel.src.database.vector_store import MovieVectorStore

DIMS = 4


def embed_all(embedder, records):
    return [r.with_embedding(v) for r, v in zip(records, embedder.embed_documents([r.description for r in records]))]


def _record(record_id, vector, title=None):
    return CorpusRecord(id=record_id, title=title or record_id.title(), description=f"about {record_id}", reference=f"ref-{record_id}", embedding=vector)


@pytest.fixture
def store(db_path):
    return MovieVectorStore(db_path=db_path, table_name="movies", dimensions=DIMS)


class TestCollectionLifecycle:

    def test_absent_until_created(self, store):
        assert not store.collection_exists()
        assert store.count() == 0

    def test_create_is_idempotent(self, store):
        store.create_collection_if_absent()
        store.create_collection_if_absent()
        assert store.collection_exists()
        assert store.count() == 0

    def test_drop(self, store):
        store.create_collection_if_absent()
        store.drop_collection()
        assert not store.collection_exists()

    def test_drop_missing_is_noop(self, store):
        store.drop_collection()
        assert not store.collection_exists()


class TestUpsert:

    def test_requires_collection(self, store):
        with pytest.raises(RuntimeError):
            store.upsert([_record("a", [1.0, 0.0, 0.0, 0.0])])

    def test_requires_embedding(self, store):
        store.create_collection_if_absent()
        with pytest.raises(ValueError):
            store.upsert([CorpusRecord(id="a", title="A", description="d")])

    def test_rejects_wrong_dimension(self, store):
        store.create_collection_if_absent()
        with pytest.raises(ValueError):
            store.upsert([_record("a", [1.0, 0.0])])

    def test_upsert_replaces_by_id(self, store):
        store.create_collection_if_absent()
        store.upsert([_record("a", [1.0, 0.0, 0.0, 0.0], title="Old")])
        store.upsert([_record("a", [1.0, 0.0, 0.0, 0.0], title="New")])

        assert store.count() == 1
        hits = store.search([1.0, 0.0, 0.0, 0.0], k=5)
        assert hits[0].record.title == "New"

    def test_empty_upsert(self, store):
        assert store.upsert([]) == 0


class TestSearch:

    def test_missing_table_returns_no_hits(self, store):
        assert store.search([1.0, 0.0, 0.0, 0.0], k=3) == []

    def test_empty_table_returns_no_hits(self, store):
        store.create_collection_if_absent()
        assert store.search([1.0, 0.0, 0.0, 0.0], k=3) == []

    def test_descending_scores_and_k(self, store):
        store.create_collection_if_absent()
        store.upsert([
            _record("x", [1.0, 0.0, 0.0, 0.0]),
            _record("xy", [1.0, 1.0, 0.0, 0.0]),
            _record("y", [0.0, 1.0, 0.0, 0.0]),
        ])

        hits = store.search([1.0, 0.0, 0.0, 0.0], k=2)

        assert [hit.record.id for hit in hits] == ["x", "xy"]
        assert hits[0].score >= hits[1].score
        assert hits[0].score == pytest.approx(1.0, abs=1e-3)

    def test_hits_carry_full_record(self, store):
        store.create_collection_if_absent()
        store.upsert([_record("x", [0.0, 0.0, 1.0, 0.0])])

        record = store.search([0.0, 0.0, 1.0, 0.0], k=1)[0].record

        assert record.reference == "ref-x"
        assert record.description == "about x"
        assert record.embedding == pytest.approx([0.0, 0.0, 1.0, 0.0])

    def test_k_larger_than_corpus(self, db_path, embedder, scenario_movies):
        wide = MovieVectorStore(db_path=db_path, table_name="wide", dimensions=embedder.dimensions)
        wide.create_collection_if_absent()
        wide.upsert(embed_all(embedder, scenario_movies))

        assert len(wide.search(embedder.embed_query("dreams"), k=10)) == 2
