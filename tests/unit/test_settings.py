"""
Unit tests for Settings validation.
"""

import pytest
from pydantic import ValidationError

from reel.config.settings import Settings


class TestSettings:

    def test_defaults(self):
        s = Settings(GOOGLE_API_KEY="k")
        assert s.SEARCH_RESULTS_LIMIT == 10
        assert s.LANCEDB_TABLE_NAME == "movies"
        assert s.TRANSACTIONAL_MEMORY is False
        assert s.CORPUS_PATH.name == "movies.json"

    def test_api_key_is_secret(self):
        s = Settings(GOOGLE_API_KEY="super-secret")
        assert "super-secret" not in repr(s)
        assert s.GOOGLE_API_KEY.get_secret_value() == "super-secret"

    @pytest.mark.parametrize("field, value", [("SEARCH_RESULTS_LIMIT", 0), ("INGEST_BATCH_SIZE", 0), ("EMBEDDING_DIMENSIONS", 0), ("LLM_TEMPERATURE", 3.0)])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Settings(GOOGLE_API_KEY="k", **{field: value})

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SEARCH_RESULTS_LIMIT", "3")
        assert Settings(GOOGLE_API_KEY="k").SEARCH_RESULTS_LIMIT == 3
