"""Shared pytest fixtures for the ScholarPulse test suite."""

import os
import tempfile

# Env must be in place before config.get_settings() is first called
os.environ.setdefault("LLM_API_KEY", "test-key")
os.environ.setdefault(
    "DATABASE_URL", f"sqlite+aiosqlite:///{tempfile.mkdtemp()}/scholarpulse-test.db"
)
os.environ.setdefault("AGENT_MAX_RETRIES", "0")

import pytest  # noqa: E402

from fakes import FakeLLM, FakeScholar, SAMPLE_DRAFT  # noqa: E402


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_scholar():
    return FakeScholar()


@pytest.fixture
def sample_draft():
    return SAMPLE_DRAFT


@pytest.fixture(autouse=True)
def clear_stores():
    from services.session_store import get_review_store, get_workspace_store
    get_review_store().clear()
    get_workspace_store().clear()
    yield
    get_review_store().clear()
    get_workspace_store().clear()
