"""
Pytest configuration and fixtures for case-aggregator tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import datetime as dt
from pathlib import Path
from typing import Callable

import pytest
import requests

from case_aggregator.core.config import PipelineConfig


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't touch the filesystem or network"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that run the pipeline over cached report files"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that drive the command-line interface"
    )


# =======================
# REPORT FIXTURES
# =======================

@pytest.fixture(scope="function")
def data_dir(tmp_path) -> Path:
    """
    Provide an empty directory for cached daily reports

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to the report cache directory
    """
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture(scope="function")
def write_report(data_dir) -> Callable[[dt.date, str, list[str]], Path]:
    """
    Factory writing a cached report named the way the fetcher names it

    Returns:
        Function (day, header, rows) -> path of the written report
    """
    def _write(day: dt.date, header: str, rows: list[str]) -> Path:
        path = data_dir / f"{day.strftime('%m-%d-%Y')}.csv"
        path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture(scope="function")
def make_config(data_dir) -> Callable[..., PipelineConfig]:
    """
    Factory for configurations pointing at the temporary report cache
    """
    def _make(**overrides) -> PipelineConfig:
        settings = {"data_dir": data_dir, "url_template": "https://reports.test/{date}.csv"}
        settings.update(overrides)
        return PipelineConfig(**settings)

    return _make


# =======================
# HTTP FIXTURES
# =======================

class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code: int = 200, content: bytes = b""):
        self.status_code = status_code
        self.content = content

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """
    Records requested URLs and serves canned responses

    Unknown URLs get a 404 response.
    """

    def __init__(self, responses: dict[str, FakeResponse] | None = None):
        self.responses = responses or {}
        self.requested: list[str] = []
        self.timeouts: list[float] = []

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        self.requested.append(url)
        self.timeouts.append(timeout)
        response = self.responses.get(url, FakeResponse(status_code=404))
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(scope="function")
def fake_session() -> FakeSession:
    """HTTP session that never touches the network"""
    return FakeSession()


@pytest.fixture(scope="function")
def make_session() -> Callable[[dict], FakeSession]:
    """
    Factory for sessions serving canned report bodies

    Values may be bytes (served with status 200), an int status code,
    or an exception to raise from get().
    """
    def _make(bodies: dict) -> FakeSession:
        responses = {}
        for url, body in bodies.items():
            if isinstance(body, bytes):
                responses[url] = FakeResponse(content=body)
            elif isinstance(body, int):
                responses[url] = FakeResponse(status_code=body)
            else:
                responses[url] = body
        return FakeSession(responses)

    return _make
