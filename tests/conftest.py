"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from fakes import FakeGistApi, RecordingSleep, RecordingTransfer


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def transfer() -> RecordingTransfer:
    return RecordingTransfer()


@pytest.fixture
def api() -> FakeGistApi:
    return FakeGistApi()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    """Remove environment variables that feed settings."""
    for name in ('GITHUB_TOKEN', 'GITHUB_THROTTLE', 'GIST_CONCEAL_GIT_TIMEOUT', 'LOAD_ENV_FILE'):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
