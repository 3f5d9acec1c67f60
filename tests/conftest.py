"""Shared test fixtures and configuration."""

import os
from pathlib import Path

import pytest


# Test environment that overrides every FAQ_ setting the code reads
TEST_ENV = {
    "FAQ_DATABASE_PATH": "faq-test.sqlite",
    "FAQ_FUZZY_THRESHOLD": "0.5",
    "FAQ_LOOKUP_SEPARATOR": "|",
    "FAQ_SUGGESTION_LIMIT": "25",
    "FAQ_CACHE_LOCK_TIMEOUT": "1.0",
    "FAQ_LOG_LEVEL": "info",
    "FAQ_LOG_JSON": "true",
    "FAQ_TRACING_ENABLED": "false",
}

# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value

from faq_resolver.adapters.document_store import FakeDocumentStore, SqliteDocumentStore
from faq_resolver.config import Settings
from faq_resolver.domain.model import FaqEntry
from faq_resolver.search.title_index import TitleIndexCache
from faq_resolver.service_layer.faq_service import FaqService


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset FAQ_ environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(database_path=tmp_path / "faq.sqlite")


@pytest.fixture
def fake_store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> SqliteDocumentStore:
    return SqliteDocumentStore(tmp_path / "faq.sqlite")


@pytest.fixture(params=["fake", "sqlite"])
def store(request, tmp_path: Path):
    """Every store implementation, so contract tests run against both."""
    if request.param == "fake":
        return FakeDocumentStore()
    return SqliteDocumentStore(tmp_path / "faq.sqlite")


@pytest.fixture
def cache() -> TitleIndexCache:
    return TitleIndexCache(lock_timeout=0.5)


@pytest.fixture
def service(store, cache, settings) -> FaqService:
    return FaqService(store=store, cache=cache, settings=settings)


@pytest.fixture
def blueprint_entry() -> FaqEntry:
    return FaqEntry.create_content(1, "Blueprint", "Use blueprints to copy layouts.", edit_time=1700000000, author_id=42)
