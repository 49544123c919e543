"""Unit tests for settings loading."""

import pytest

from docindex_common.config import ServerSettings
from docindex_common.constants import COLLECTION_NAME, DEFAULT_USER_AGENT


def test_defaults_when_environment_is_empty():
    settings = ServerSettings.from_env({})

    assert settings.scraper.timeout == 10.0
    assert settings.scraper.user_agent == DEFAULT_USER_AGENT
    assert settings.scraper.max_content_length == 1_000_000
    assert settings.indexer.request_delay_ms == 100
    assert settings.chroma.host == "chromadb"
    assert settings.chroma.port == 8000
    assert settings.chroma.collection_name == COLLECTION_NAME
    assert settings.log_level == "INFO"


def test_reads_overrides():
    settings = ServerSettings.from_env(
        {
            "SCRAPER_TIMEOUT": "2.5",
            "SCRAPER_USER_AGENT": "Bot/1.0",
            "SCRAPER_REQUEST_DELAY_MS": "0",
            "INDEX_REQUEST_DELAY_MS": "25",
            "CHROMA_HOST": "localhost",
            "CHROMA_PORT": "9000",
            "LOG_LEVEL": "debug",
        }
    )

    assert settings.scraper.timeout == 2.5
    assert settings.scraper.user_agent == "Bot/1.0"
    assert settings.scraper.request_delay_ms == 0
    assert settings.indexer.request_delay_ms == 25
    assert settings.chroma.host == "localhost"
    assert settings.chroma.port == 9000
    assert settings.log_level == "DEBUG"


def test_empty_value_falls_back_to_default():
    assert ServerSettings.from_env({"CHROMA_PORT": ""}).chroma.port == 8000


def test_non_numeric_value_fails_fast():
    with pytest.raises(ValueError, match="CHROMA_PORT"):
        ServerSettings.from_env({"CHROMA_PORT": "eight"})


def test_reads_os_environ_by_default(monkeypatch):
    monkeypatch.setenv("CHROMA_HOST", "from-env")
    assert ServerSettings.from_env().chroma.host == "from-env"
