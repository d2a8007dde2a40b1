"""
Tests for the Lambda entry point, running against mock storage.
"""

import asyncio

import pytest

from src.api import dependencies
from src.config.settings import get_settings
from src.handlers import lambda_handler


@pytest.fixture(autouse=True)
def mock_environment(monkeypatch):
    monkeypatch.setenv("STORAGE_MOCK_MODE", "true")
    monkeypatch.setenv("SUPPORTED_LANGUAGES", "en,fr")
    get_settings.cache_clear()
    dependencies.reset_mock_storage()
    yield
    get_settings.cache_clear()
    dependencies.reset_mock_storage()


def test_lambda_handler_routes_records():
    event = {
        "Records": [
            {"eventName": "ObjectCreated:Put", "s3": {"object": {"key": "videos/c1/d1/v1/en/a.mp4"}}},
            {"eventName": "ObjectRemoved:Delete", "s3": {"object": {"key": "videos/c1/d2/v2/en/b.mp4"}}},
        ]
    }

    result = lambda_handler(event, None)

    assert result == {"processed": 2, "ignored": 0}

    storage = dependencies.build_storage_client(get_settings())
    names = asyncio.run(storage.list_objects(""))
    assert names == [
        "bundles/c1/d1/bundle.json",
        "bundles/c1/d2/bundle.json",
        "videos/c1/d1/v1/en/.placeholder",
        "videos/c1/d1/v1/fr/.placeholder",
    ]


def test_lambda_handler_ignores_unrelated_events():
    assert lambda_handler({"Records": []}, None) == {"processed": 0, "ignored": 0}


def test_lambda_handler_acknowledges_malformed_events():
    event = {"Records": [None, {"eventName": None, "s3": {"object": {"key": "videos/c1/d1/v1/en/a.mp4"}}}]}

    assert lambda_handler(event, None) == {"processed": 0, "ignored": 2}
    assert lambda_handler({"Records": None}, None) == {"processed": 0, "ignored": 0}
