"""Shared pytest fixtures for the fortune report tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from fortune_report.clients.llm_client import GenerationClient
from fortune_report.core.config import Settings
from fortune_report.services.fortune import FortuneReportService

SAMPLE_HTML = "<h2>Overview</h2><p>A bright year.</p><ul><li>Do: rest well.</li></ul>"


@pytest.fixture
def settings() -> Settings:
    """Settings with a credential and a cutoff far in the future."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test-key",
        openai_api_base_url="https://api.openai.com/v1",
        openai_api_style="chat",
        openai_model="gpt-4.1-mini",
        openai_max_tokens=1200,
        sign_off_html=None,
        expiry_date="2099-12-31",
    )


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2026-01-15 12:00 UTC."""
    return lambda: datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_client() -> AsyncMock:
    """Generation client double that returns SAMPLE_HTML."""
    client = AsyncMock(spec=GenerationClient)
    client.generate.return_value = SAMPLE_HTML
    return client


@pytest.fixture
def service(settings, fake_client, fixed_clock) -> FortuneReportService:
    return FortuneReportService(settings, fake_client, clock=fixed_clock)


def make_session(status: int = 200, json_data=None, text: str = ""):
    """Build a MagicMock aiohttp session whose ``post`` yields one canned response."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)

    session = MagicMock()
    session.post.return_value.__aenter__.return_value = response
    # must be falsy or exceptions raised inside ``async with`` get swallowed
    session.post.return_value.__aexit__.return_value = False
    return session, response


@pytest.fixture
def session_factory():
    return make_session
