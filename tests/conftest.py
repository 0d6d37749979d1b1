"""Shared pytest fixtures."""

import os
import sys
from collections.abc import Callable
from typing import Any

import pytest
from hypothesis import HealthCheck, settings

from price_paid.config import Settings
from price_paid.models import RawPropertyRecord


def pytest_configure(config: pytest.Config) -> None:
    """Force line-buffered stdout when piped."""
    if hasattr(sys.stdout, "reconfigure") and not sys.stdout.isatty():
        sys.stdout.reconfigure(line_buffering=True)
    if hasattr(sys.stderr, "reconfigure") and not sys.stderr.isatty():
        sys.stderr.reconfigure(line_buffering=True)


# Hypothesis settings profiles for different environments
settings.register_profile("fast", max_examples=10)
settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "fast"))


SEARCH_URL = "https://test-search.search.windows.net"
TABLE_URL = "https://testaccount.table.core.windows.net"


@pytest.fixture(autouse=True)
def _isolate_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent the local .env file from leaking into test Settings instances."""
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )


@pytest.fixture(autouse=True)
def _keep_default_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Stop entry points from caching loggers bound to a test's captured stderr."""
    monkeypatch.setattr("price_paid.main.configure_logging", lambda **_: None)
    monkeypatch.setattr("price_paid.web.app.configure_logging", lambda **_: None)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        search_service_url=SEARCH_URL,
        search_api_key="query-key",
        table_account_url=TABLE_URL,
        table_sas_token="sv=2019-02-02&sig=abc",
    )


@pytest.fixture
def make_document() -> Callable[..., dict[str, Any]]:
    """Factory for index documents in the wire format returned by the search API."""

    def _make(**overrides: Any) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "@search.score": 1.0,
            "TransactionId": "{A1B2C3D4-0001}",
            "Price": 1250000,
            "DateOfTransfer": "2017-06-30T00:00:00Z",
            "PostCode": "SW1A 2AA",
            "PropertyType": "T",
            "OldNew": "N",
            "Duration": "F",
            "Paon": "10",
            "Saon": None,
            "Street": "DOWNING STREET",
            "Locality": None,
            "TownCity": "LONDON",
            "District": "CITY OF WESTMINSTER",
            "County": "GREATER LONDON",
            "Geo": {"type": "Point", "coordinates": [-0.1276, 51.5034]},
        }
        doc.update(overrides)
        return doc

    return _make


@pytest.fixture
def make_record(make_document: Callable[..., dict[str, Any]]) -> Callable[..., RawPropertyRecord]:
    def _make(**overrides: Any) -> RawPropertyRecord:
        return RawPropertyRecord.model_validate(make_document(**overrides))

    return _make


@pytest.fixture
def search_payload(make_document: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    """A realistic search response with two documents and all five facets."""
    return {
        "@odata.context": "https://test-search.search.windows.net/indexes('properties')/$metadata",
        "@search.facets": {
            "TownCity": [{"count": 2, "value": "LONDON"}],
            "Locality": [],
            "District": [{"count": 2, "value": "CITY OF WESTMINSTER"}],
            "County": [{"count": 2, "value": "GREATER LONDON"}],
            "Price": [
                {"count": 1, "value": 1250000},
                {"count": 1, "value": 540000.0},
            ],
        },
        "value": [
            make_document(),
            make_document(
                TransactionId="{A1B2C3D4-0002}",
                Price=540000,
                PropertyType="F",
                OldNew="Y",
                Duration="L",
                Paon="WHITEHALL COURT",
                Saon="FLAT 2",
                Street="WHITEHALL PLACE",
            ),
        ],
    }
