"""Command line tests.

The CLI builds its own ``CatalogClient``; ``build_async_client`` is patched so
the client talks to the in-process fake backend.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import httpx
import pytest
from click.testing import CliRunner
from fake_backend import FakeBackend
from loguru import logger

from trackml.cli import main


@pytest.fixture(autouse=True)
def _drop_log_sinks() -> Iterator[None]:
    # The CLI installs a stderr sink bound to the runner's captured stream.
    yield
    logger.remove()


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    fake = FakeBackend()
    fake.add_model(3, name="llama-3", model_type="LLM", status="Tried", tags=["open"])
    fake.add_model(5, name="mistral-7b", model_type="LLM", status="Studying")

    def _build(settings: Any = None, *, transport: Any = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=fake.app), base_url="http://test/api/v1")

    monkeypatch.setattr("trackml.catalog.transport.build_async_client", _build)
    monkeypatch.setenv("TRACKML_TOKEN", fake.token)
    monkeypatch.setenv("TRACKML_LOG_LEVEL", "ERROR")
    return fake


def test_missing_token() -> None:
    result = CliRunner().invoke(main, ["models", "list"])
    assert result.exit_code == 1
    assert "No API token configured" in result.output


def test_rejected_token(backend: FakeBackend, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRACKML_TOKEN", "stale")
    result = CliRunner().invoke(main, ["models", "list"])
    assert result.exit_code == 1
    assert "please log in again" in result.output


def test_list_with_filters(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "list", "--status", "Tried", "--tag", "open"])
    assert result.exit_code == 0, result.output
    assert "llama-3" in result.output
    assert "mistral-7b" not in result.output
    assert backend.calls_to("GET", "/models/search")[0].params == {"status": "Tried", "tag": "open"}


def test_list_rejects_unknown_type(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "list", "--type", "Spreadsheet"])
    assert result.exit_code == 2


def test_add_requires_name(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "add", "--developer", "Meta"])
    assert result.exit_code == 1
    assert "Name is required" in result.output
    assert backend.calls_to("POST", "/models") == []


def test_add_with_autofill(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "add", "--autofill", "microsoft/phi-3", "--tag", "small"])
    assert result.exit_code == 0, result.output
    assert "Created model 6: phi-3" in result.output
    created = backend.models[6]
    assert created["developer"] == "microsoft"
    assert created["tags"] == ["hub", "open-weights", "small"]


def test_rm_with_yes(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "rm", "5", "--yes"])
    assert result.exit_code == 0, result.output
    assert "Deleted model 5." in result.output
    assert 5 not in backend.models


def test_rm_declined(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "rm", "5"], input="n\n")
    assert "Aborted." in result.output
    assert 5 in backend.models


def test_compare(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "compare", "3", "5"])
    assert result.exit_code == 0, result.output
    assert "Comparing llama-3 and mistral-7b." in result.output


def test_compare_needs_two(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "compare", "3"])
    assert result.exit_code == 1
    assert "at least 2 models" in result.output


def test_stats(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["stats"])
    assert result.exit_code == 0, result.output
    assert "Models: 2" in result.output


def test_log_level_option_overrides_settings(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["--log-level", "debug", "stats"])
    assert result.exit_code == 0, result.output
    assert "Logging initialised (level=DEBUG)" in result.output


def test_show_with_insights(backend: FakeBackend) -> None:
    result = CliRunner().invoke(main, ["models", "show", "3", "--insights"])
    assert result.exit_code == 0, result.output
    assert "Technical analysis:\nllama-3 is a dense decoder-only transformer." in result.output
    assert "Use cases:\nllama-3 is well suited to chat." in result.output
    assert "Recommendations:" not in result.output
